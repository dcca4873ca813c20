"""
In-Memory Storage

Process-local media. Nothing survives the process, which is exactly
what tests and throwaway sessions want.
"""

from collections import deque
from typing import Optional

from goals_accounts.models.audit import AuditEvent
from goals_accounts.services.storage.interface import (
    AuditStorageInterface,
    StorageInterface,
)


class InMemoryStorage(StorageInterface):
    """Dict-backed slot storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove_item(self, key: str) -> None:
        self._slots.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._slots)


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Bounded in-memory audit trail.

    Keeps the most recent `max_events` events; older ones fall off.
    """

    def __init__(self, max_events: int = 1000):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
