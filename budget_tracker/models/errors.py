"""
Domain Error Taxonomy

Every failure in the financial core is a closed, enumerable error kind.
Each component owns one exception class whose `code` comes from a
`str, Enum` code set, so callers can branch on the kind instead of
parsing messages.

DESIGN DECISION: These exceptions derive from Exception, not ValueError.
Pydantic only wraps ValueError/AssertionError raised inside validators,
so our typed errors travel through model construction untouched.
"""

from enum import Enum
from typing import Any, ClassVar, Optional


class BudgetTrackerError(Exception):
    """
    Base class for all typed domain errors.

    Subclasses declare their code enum and a message per code.
    """

    messages: ClassVar[dict[Enum, str]] = {}

    def __init__(
        self,
        code: Enum,
        message: Optional[str] = None,
        **details: Any,
    ):
        self.code = code
        self.details = details
        super().__init__(message or self.messages.get(code, code.value))

    @property
    def message(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.value!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for logs and API responses."""
        return {
            "error": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
            "details": {key: _plain(value) for key, value in self.details.items()},
        }


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value if isinstance(value, (int, float, str, bool, type(None))) else str(value)
