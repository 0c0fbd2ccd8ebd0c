"""
Audit Logger

DESIGN DECISION: Every report the user sees is logged together with the
ledger fetch that produced it. This provides:
1. Traceability of every displayed total
2. Debugging capability when a report fails

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from budget_tracker.config import AppSettings, get_settings
from budget_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from budget_tracker.services.storage import AuditStorageInterface


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure stdlib logging and structlog from application settings.

    JSON output by default; set LOG_JSON=false for a console renderer.
    DEBUG_MODE=true forces DEBUG level. Every log line carries the
    application environment.
    """
    settings = settings or get_settings().app

    level = "DEBUG" if settings.debug_mode else settings.log_level
    logging.basicConfig(format="%(message)s", level=level)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(environment=settings.app_environment)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Audit failures never break the caller
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_report_generated(
        self,
        scope: str,
        date_range: str,
        transaction_count: int,
        total: str,
        correlation_id: UUID,
        period_id: Optional[UUID] = None,
    ) -> None:
        """Log a successfully generated spending report."""
        event = AuditEventBuilder.report_generated(
            scope=scope,
            date_range=date_range,
            transaction_count=transaction_count,
            total=total,
            correlation_id=correlation_id,
            period_id=period_id,
        )
        await self.log(event)

    async def log_report_failed(
        self,
        scope: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
        period_id: Optional[UUID] = None,
    ) -> None:
        """Log a report that could not be generated."""
        event = AuditEventBuilder.report_failed(
            scope=scope,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
            period_id=period_id,
        )
        await self.log(event)

    async def log_transactions_fetched(
        self,
        result_count: int,
        filters: dict[str, Any],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transactions_fetched(
            result_count=result_count,
            filters=filters,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_draft_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.draft_validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage failure."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., opening a report).
    Pass it through all subsequent operations.
    """
    return uuid4()
