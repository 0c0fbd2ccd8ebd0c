"""Tests for audit models and the audit logger."""

import asyncio
import logging
from uuid import uuid4

import pytest
import structlog

from budget_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from budget_tracker.config import AppSettings
from budget_tracker.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from budget_tracker.services.storage import InMemoryAuditStorage, StorageError


class BrokenAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event: AuditEvent) -> bool:
        raise StorageError("disk full")


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            description="Test event",
        )
        assert event.event_type == AuditEventType.REPORT_GENERATED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None
        assert event.timestamp.tzinfo is not None

    def test_to_log_dict(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.report_failed(
            scope="period",
            error_code="period_not_found",
            error_message="Expense period not found",
            correlation_id=correlation_id,
            period_id=uuid4(),
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "report_failed"
        assert log_dict["severity"] == "error"
        assert log_dict["entity_type"] == "period"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["error_code"] == "period_not_found"

    def test_report_generated_builder(self):
        event = AuditEventBuilder.report_generated(
            scope="date_range",
            date_range="Mar 1, 2025 - Mar 31, 2025",
            transaction_count=3,
            total="$100.00",
            correlation_id=uuid4(),
        )
        assert event.entity_type == "report"
        assert event.entity_id is None
        assert "$100.00" in event.description

    def test_transactions_fetched_drops_empty_filters(self):
        event = AuditEventBuilder.transactions_fetched(
            result_count=2,
            filters={"category_id": None, "limit": 10},
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.DEBUG
        assert event.details["filters"] == {"limit": "10"}

    def test_draft_validation_failed_builder(self):
        event = AuditEventBuilder.draft_validation_failed(
            issues=[{"field": "amount"}, {"field": "name"}],
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.description == "Transaction draft rejected with 2 issues"


class TestAuditLogger:

    def test_log_without_storage(self):
        logger = AuditLogger()
        event = AuditEventBuilder.storage_error("save_transaction", "boom")
        assert asyncio.run(logger.log(event)) is True

    def test_log_persists(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()
        asyncio.run(logger.log_storage_error("get_period", "timeout", correlation_id))
        (event,) = asyncio.run(storage.get_events_by_correlation_id(correlation_id))
        assert event.event_type == AuditEventType.STORAGE_ERROR
        assert event.error_message == "timeout"

    def test_storage_failure_does_not_raise(self):
        logger = AuditLogger(BrokenAuditStorage())
        event = AuditEventBuilder.storage_error("save_transaction", "boom")
        assert asyncio.run(logger.log(event)) is False

    def test_helpers_build_matching_events(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()
        asyncio.run(logger.log_transactions_fetched(4, {"limit": 10}, correlation_id))
        asyncio.run(logger.log_report_generated("date_range", "Mar 1 - 31", 4, "$10.00", correlation_id))
        asyncio.run(logger.log_report_failed("date_range", "currency_mismatch", "mixed", correlation_id))
        asyncio.run(logger.log_draft_validation_failed([{"field": "name"}], correlation_id))

        events = asyncio.run(storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.TRANSACTIONS_FETCHED,
            AuditEventType.REPORT_GENERATED,
            AuditEventType.REPORT_FAILED,
            AuditEventType.DRAFT_VALIDATION_FAILED,
        ]

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()


class TestConfigureLogging:

    def test_configures_structlog(self):
        try:
            configure_logging(AppSettings(log_level="debug", log_json=False))
            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()
            structlog.contextvars.clear_contextvars()

    def test_environment_and_debug_mode(self):
        """Every log line is tagged with the environment; debug mode forces DEBUG."""
        root = logging.getLogger()
        previous_level = root.level
        try:
            configure_logging(AppSettings(
                app_environment="staging", debug_mode=True, log_level="ERROR", log_json=True
            ))
            assert structlog.contextvars.get_contextvars()["environment"] == "staging"
            assert root.isEnabledFor(logging.DEBUG)
        finally:
            root.setLevel(previous_level)
            structlog.reset_defaults()
            structlog.contextvars.clear_contextvars()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
