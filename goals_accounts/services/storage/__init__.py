"""
Storage Services Package

Provides the slot storage port, its concrete media, and the repository
that loads/saves the Document through it.
"""

from goals_accounts.services.storage.interface import (
    AuditStorageInterface,
    StorageCorruptError,
    StorageError,
    StorageInterface,
    StorageUnavailableError,
)
from goals_accounts.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStorage,
)
from goals_accounts.services.storage.file import FileStorage
from goals_accounts.services.storage.repository import (
    DEFAULT_STORAGE_KEY,
    DocumentRepository,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "StorageInterface",
    # Exceptions
    "StorageCorruptError",
    "StorageError",
    "StorageUnavailableError",
    # Media
    "FileStorage",
    "InMemoryAuditStorage",
    "InMemoryStorage",
    # Repository
    "DEFAULT_STORAGE_KEY",
    "DocumentRepository",
]
