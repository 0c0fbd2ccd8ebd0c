"""
Audit Models for the Budget Tracker

Report generation, ledger fetches and rejected input are recorded as
audit events. This gives:
1. Traceability of every figure shown to the user
2. Debugging information when a report fails
3. A history that can be replayed by correlation id

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from budget_tracker.models.date_range import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Reporting
    REPORT_GENERATED = "report_generated"
    REPORT_FAILED = "report_failed"

    # Ledger access
    TRANSACTIONS_FETCHED = "transactions_fetched"

    # Input validation
    DRAFT_VALIDATION_FAILED = "draft_validation_failed"

    # Infrastructure
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'report', 'transaction', 'period')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a fetch and the report built from it)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.report_generated(...)
        event = AuditEventBuilder.storage_error("list_transactions", str(e), correlation_id)
    """

    @staticmethod
    def report_generated(
        scope: str,
        date_range: str,
        transaction_count: int,
        total: str,
        correlation_id: UUID,
        period_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            entity_type="period" if period_id else "report",
            entity_id=period_id,
            correlation_id=correlation_id,
            description=f"Spending report generated for {date_range}: {total}",
            details={
                "scope": scope,
                "date_range": date_range,
                "transaction_count": transaction_count,
                "total": total,
            },
        )

    @staticmethod
    def report_failed(
        scope: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
        period_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="period" if period_id else "report",
            entity_id=period_id,
            correlation_id=correlation_id,
            description=f"Spending report failed ({scope})",
            details={"scope": scope},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def transactions_fetched(
        result_count: int,
        filters: dict[str, Any],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_FETCHED,
            severity=AuditSeverity.DEBUG,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Fetched {result_count} transactions",
            details={
                "result_count": result_count,
                "filters": {key: str(value) for key, value in filters.items() if value is not None},
            },
        )

    @staticmethod
    def draft_validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DRAFT_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction draft rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
