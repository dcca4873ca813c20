"""
Abstract Storage Interface

DESIGN DECISION: The data layer talks to its storage medium through a
tiny key -> text port, the same shape as a browser's localStorage.
This allows us to:
1. Use in-memory storage for tests and UI-less environments
2. Keep the document on disk as a plain JSON file
3. Run with no medium at all (every write becomes a no-op)

The interface is intentionally simple - the whole dataset is one
value under one key.
"""

from abc import ABC, abstractmethod
from typing import Optional

from goals_accounts.models.audit import AuditEvent


class StorageInterface(ABC):
    """
    Abstract key-value slot storage.

    Any medium (memory, file, ...) must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Returns:
            The stored text, or None if the slot is empty

        Raises:
            StorageUnavailableError: If the medium cannot be read
            StorageCorruptError: If the stored value cannot be decoded
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Replace the text stored under a key.

        The write is all-or-nothing: readers see either the old
        value or the new one.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Empty a slot. Removing an empty slot is not an error.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific record.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage medium is missing or cannot be used right now."""
    pass


class StorageCorruptError(StorageError):
    """The medium was read, but the stored value is not valid text."""
    pass
