"""Transaction draft validation package."""

from budget_tracker.validation.validator import (
    TransactionDraft,
    TransactionValidator,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "TransactionDraft",
    "TransactionValidator",
    "ValidationIssue",
    "ValidationResult",
]
