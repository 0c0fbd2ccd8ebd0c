"""Services package."""

from budget_tracker.services.storage import (
    AuditStorageInterface,
    CategoryStorageInterface,
    DuplicateError,
    ExpensePeriodStorageInterface,
    InMemoryAuditStorage,
    InMemoryCategoryStorage,
    InMemoryPeriodStorage,
    InMemoryStore,
    InMemoryTransactionStorage,
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    "AuditStorageInterface",
    "CategoryStorageInterface",
    "DuplicateError",
    "ExpensePeriodStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryCategoryStorage",
    "InMemoryPeriodStorage",
    "InMemoryStore",
    "InMemoryTransactionStorage",
    "NotFoundError",
    "ReferentialIntegrityError",
    "StorageError",
    "TransactionStorageInterface",
]
