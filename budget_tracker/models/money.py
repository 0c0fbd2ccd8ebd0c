"""
Money Value Object

An immutable (amount, currency) pair with currency-guarded arithmetic.

DESIGN DECISION: Money itself allows negative amounts. Subtraction and
other intermediate results can legitimately go below zero; strict
positivity is enforced where it matters (the Transaction boundary).
Callers that need a non-negative value call `validate_non_negative()`.

Amounts are always Decimal. Floats are converted through their string
form so that Money.of(50.1, ...) holds Decimal("50.1"), not the binary
approximation.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Any, Iterable, Union

from pydantic import BaseModel, ConfigDict, field_validator

from budget_tracker.models.currency import Currency
from budget_tracker.models.errors import BudgetTrackerError


class MoneyErrorCode(str, Enum):
    NEGATIVE_AMOUNT = "negative_amount"
    CURRENCY_MISMATCH = "currency_mismatch"
    DIVISION_BY_ZERO = "division_by_zero"
    INVALID_AMOUNT = "invalid_amount"


class MoneyError(BudgetTrackerError):
    """Raised by Money construction, arithmetic and comparison."""

    messages = {
        MoneyErrorCode.NEGATIVE_AMOUNT: "Amount cannot be negative",
        MoneyErrorCode.CURRENCY_MISMATCH: "Cannot perform operation on different currencies",
        MoneyErrorCode.DIVISION_BY_ZERO: "Cannot divide by zero",
        MoneyErrorCode.INVALID_AMOUNT: "Invalid amount value",
    }

    @classmethod
    def currency_mismatch(cls, first: Currency, second: Currency) -> "MoneyError":
        return cls(
            MoneyErrorCode.CURRENCY_MISMATCH,
            "Cannot perform operation on different currencies: "
            f"{first.value} and {second.value}",
            currencies=(first, second),
        )


Scalar = Union[Decimal, int, float, Fraction]


def to_decimal(value: Any) -> Decimal:
    """
    Convert a numeric value to a finite Decimal.

    Accepts Decimal, int, float, Fraction and numeric strings.
    Raises MoneyError(INVALID_AMOUNT) for anything else, including
    booleans, NaN and infinities.
    """
    if isinstance(value, bool):
        raise MoneyError(MoneyErrorCode.INVALID_AMOUNT, f"Invalid amount value: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, Fraction):
        result = Decimal(value.numerator) / Decimal(value.denominator)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise MoneyError(
                MoneyErrorCode.INVALID_AMOUNT, f"Invalid amount value: {value!r}"
            ) from None
    else:
        raise MoneyError(MoneyErrorCode.INVALID_AMOUNT, f"Invalid amount value: {value!r}")

    if not result.is_finite():
        raise MoneyError(MoneyErrorCode.INVALID_AMOUNT, f"Invalid amount value: {value!r}")
    return result


class Money(BaseModel):
    """
    Monetary amount tagged with its currency.

    Two Money values are equal when amount and currency are equal
    (Decimal("50") == Decimal("50.00")).
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: Currency

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, amount: Any, currency: Currency) -> "Money":
        return cls(amount=amount, currency=currency)

    @classmethod
    def zero(cls, currency: Currency) -> "Money":
        """Identity element for accumulation loops."""
        return cls(amount=Decimal(0), currency=currency)

    @classmethod
    def total_of(cls, values: Iterable["Money"], currency: Currency) -> "Money":
        """Sum values starting from zero; fails on the first foreign currency."""
        total = cls.zero(currency)
        for value in values:
            total = total.add(value)
        return total

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_non_negative(self) -> "Money":
        if self.amount < 0:
            raise MoneyError(MoneyErrorCode.NEGATIVE_AMOUNT)
        return self

    def _ensure_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise MoneyError.currency_mismatch(self.currency, other.currency)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, scalar: Scalar) -> "Money":
        factor = to_decimal(scalar)
        return Money(amount=self.amount * factor, currency=self.currency)

    def divide(self, scalar: Scalar) -> "Money":
        divisor = to_decimal(scalar)
        if divisor == 0:
            raise MoneyError(MoneyErrorCode.DIVISION_BY_ZERO)
        return Money(amount=self.amount / divisor, currency=self.currency)

    def negated(self) -> "Money":
        return Money(amount=-self.amount, currency=self.currency)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def is_greater_than(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount > other.amount

    def is_less_than(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount < other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    @property
    def absolute_value(self) -> "Money":
        return Money(amount=abs(self.amount), currency=self.currency)

    # -------------------------------------------------------------------------
    # Rounding and formatting
    # -------------------------------------------------------------------------

    def rounded(self) -> "Money":
        """Round half-up to the currency's minor unit."""
        return Money(
            amount=self.amount.quantize(self.currency.quantum, rounding=ROUND_HALF_UP),
            currency=self.currency,
        )

    def _format_magnitude(self) -> str:
        places = self.currency.decimal_places
        magnitude = abs(self.rounded().amount)
        return f"{self.currency.symbol}{magnitude:,.{places}f}"

    @property
    def formatted(self) -> str:
        """Symbol followed by the amount at the currency's precision, e.g. $1,234.50."""
        sign = "-" if self.rounded().amount < 0 else ""
        return f"{sign}{self._format_magnitude()}"

    @property
    def formatted_with_sign(self) -> str:
        """Explicit sign for income/expense display, e.g. +$5.00."""
        sign = "-" if self.rounded().amount < 0 else "+"
        return f"{sign}{self._format_magnitude()}"

    def __str__(self) -> str:
        return self.formatted
