"""
Two-Stage Validation Pipeline for Transaction Drafts

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- The same invariant checks Transaction construction runs
- This catches malformed form input

STAGE 2 - SEMANTIC VALIDATION:
- Unusually large amounts
- Very old dates
- Unknown categories
- Duplicate detection
- This catches suspicious or unresolvable data

Constructing a Transaction stops at the first broken invariant. A form
needs every problem at once, so the validator collects them as issues.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, Field

from budget_tracker.audit import AuditLogger
from budget_tracker.config import ValidationSettings, get_settings
from budget_tracker.models.currency import Currency
from budget_tracker.models.date_range import ensure_aware, utc_now
from budget_tracker.models.money import Money, MoneyError
from budget_tracker.models.transaction import (
    Transaction,
    TransactionError,
    TransactionErrorCode,
    check_amount,
    check_date,
    check_description,
    check_name,
)
from budget_tracker.services.storage import (
    CategoryStorageInterface,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)


class TransactionDraft(BaseModel):
    """
    Unvalidated transaction input, e.g. from an entry form.

    Every field is optional so incomplete input can still be inspected.
    """

    draft_id: UUID = Field(default_factory=uuid4)
    amount: Optional[Decimal] = None
    currency: Optional[Currency] = None
    name: Optional[str] = None
    category_id: Optional[UUID] = None
    date: Optional[datetime] = Field(
        default=None,
        description="Transaction date; None means now"
    )
    description: Optional[str] = None
    period_id: Optional[UUID] = None


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_amount', 'potential_duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (required fields, invariants)
    Stage 2: Semantic validation (suspicious or unresolvable values)
    """

    draft_id: UUID
    validated_at: datetime = Field(default_factory=utc_now)

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool

    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]


# Field each invariant check reports against
_CHECK_FIELDS = {
    TransactionErrorCode.INVALID_AMOUNT: "amount",
    TransactionErrorCode.EMPTY_NAME: "name",
    TransactionErrorCode.NAME_TOO_LONG: "name",
    TransactionErrorCode.FUTURE_DATE: "date",
    TransactionErrorCode.DESCRIPTION_TOO_LONG: "description",
}


def _issue_from_error(error: TransactionError) -> ValidationIssue:
    return ValidationIssue(
        field=_CHECK_FIELDS.get(error.code, "transaction"),
        issue_type=error.code.value,
        message=error.message,
        severity="error",
    )


def _missing(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{label} is required",
        severity="error",
        suggested_fix=f"Please enter the {label.lower()}",
    )


class TransactionValidator:
    """
    Validates transaction drafts through a two-stage pipeline.

    Stage 1: Schema validation (can run without storage)
    Stage 2: Semantic validation (may need storage for category and
    duplicate checks)
    """

    def __init__(
        self,
        category_storage: Optional[CategoryStorageInterface] = None,
        transaction_storage: Optional[TransactionStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ValidationSettings] = None,
        default_currency: Optional[Currency] = None,
    ):
        """
        Initialize validator.

        Args:
            category_storage: Used to confirm the category exists.
                             If None, the category check is skipped.
            transaction_storage: Used for duplicate checking.
                                If None, duplicate checking is skipped.
            audit_logger: Receives an event for every rejected draft.
        """
        self._categories = category_storage
        self._transactions = transaction_storage
        self._audit = audit_logger
        self._settings = settings or get_settings().validation
        self._default_currency = default_currency or get_settings().reports.default_currency

    def _money_of(self, draft: TransactionDraft) -> Money:
        return Money.of(draft.amount, draft.currency or self._default_currency)

    def _validate_schema(
        self,
        draft: TransactionDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if draft.amount is None:
            issues.append(_missing("amount", "Amount"))
        else:
            try:
                check_amount(self._money_of(draft))
            except TransactionError as e:
                issues.append(_issue_from_error(e))
            except MoneyError as e:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type=e.code.value,
                    message=e.message,
                    severity="error",
                ))

        if draft.name is None:
            issues.append(_missing("name", "Name"))
        else:
            try:
                check_name(draft.name)
            except TransactionError as e:
                issues.append(_issue_from_error(e))

        if draft.category_id is None:
            issues.append(_missing("category_id", "Category"))

        if draft.date is not None:
            try:
                check_date(draft.date)
            except TransactionError as e:
                issue = _issue_from_error(e)
                issue.suggested_fix = "Please pick today or an earlier date"
                issues.append(issue)

        try:
            check_description(draft.description)
        except TransactionError as e:
            issues.append(_issue_from_error(e))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    async def _validate_semantic(
        self,
        draft: TransactionDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Only runs on drafts that passed stage 1, so required fields are set.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        money = self._money_of(draft)

        if draft.amount > self._settings.large_amount_threshold:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({money.formatted}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if draft.date is not None:
            oldest_reasonable = utc_now() - timedelta(days=self._settings.old_transaction_days)
            if ensure_aware(draft.date) < oldest_reasonable:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="suspicious_date",
                    message=f"Date ({draft.date.date()}) seems unusually old",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        if self._categories is not None:
            category = await self._categories.get_category(draft.category_id)
            if category is None:
                issues.append(ValidationIssue(
                    field="category_id",
                    issue_type=TransactionErrorCode.INVALID_CATEGORY.value,
                    message="Invalid category selected",
                    severity="error",
                    suggested_fix="Please choose one of the available categories",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    async def _check_duplicates(
        self,
        draft: TransactionDraft,
        correlation_id: Optional[UUID] = None,
    ) -> list[ValidationIssue]:
        """
        Check for a transaction with the same name, amount and day.

        This requires storage access. A storage failure skips the check
        and is audited.
        """
        issues = []

        if self._transactions is None:
            return issues

        date = draft.date or utc_now()
        try:
            is_duplicate = await self._transactions.transaction_exists(
                name=draft.name,
                money=self._money_of(draft),
                date=date,
            )
        except StorageError as e:
            # Don't fail validation due to storage errors
            logger.warning("duplicate_check_failed", error=str(e), draft_id=str(draft.draft_id))
            if self._audit is not None:
                await self._audit.log_storage_error("transaction_exists", str(e), correlation_id)
            return issues

        if is_duplicate:
            issues.append(ValidationIssue(
                field="duplicate",
                issue_type="potential_duplicate",
                message=(
                    f"A transaction '{draft.name}' for {self._money_of(draft).formatted} "
                    f"on {ensure_aware(date).date()} may already exist"
                ),
                severity="warning",
                suggested_fix="Please verify this isn't a duplicate entry",
            ))

        return issues

    async def validate(
        self,
        draft: TransactionDraft,
        check_duplicates: bool = True,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            draft: The unvalidated input
            check_duplicates: Whether to check for duplicates (requires storage)
            correlation_id: Attached to the audit event of a rejected draft

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(draft)
        all_issues.extend(schema_issues)

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = await self._validate_semantic(draft)
            all_issues.extend(semantic_issues)

            if check_duplicates:
                all_issues.extend(await self._check_duplicates(draft, correlation_id))

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        result = ValidationResult(
            draft_id=draft.draft_id,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
        )

        if not result.is_valid and self._audit is not None:
            await self._audit.log_draft_validation_failed(
                issues=[issue.model_dump() for issue in result.errors],
                correlation_id=correlation_id,
            )

        return result

    def to_transaction(self, draft: TransactionDraft) -> Transaction:
        """
        Build the Transaction a draft describes.

        Raises the first TransactionError (or MoneyError) encountered;
        run validate() first to collect every issue.
        """
        if draft.amount is None:
            raise TransactionError(TransactionErrorCode.INVALID_AMOUNT, "Amount is required")
        if draft.name is None:
            raise TransactionError(TransactionErrorCode.EMPTY_NAME)
        if draft.category_id is None:
            raise TransactionError(TransactionErrorCode.INVALID_CATEGORY, "Category is required")

        return Transaction.create_detailed(
            money=self._money_of(draft),
            name=draft.name,
            category_id=draft.category_id,
            date=draft.date or utc_now(),
            description=draft.description,
            period_id=draft.period_id,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if result.errors:
            lines.append("❌ Please fix the following:")
            for issue in result.errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        if result.is_valid:
            lines.append("")
            lines.append("You can still save, but please review carefully.")

        return "\n".join(lines)
