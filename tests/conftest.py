"""
Shared fixtures.

Everything runs against in-memory media and a clock that ticks one
second per call, so timestamps are predictable and strictly increasing.
"""

from datetime import datetime, timedelta, timezone

import pytest

from goals_accounts.audit import AuditLogger
from goals_accounts.models.records import format_timestamp
from goals_accounts.services.backup import BackupService
from goals_accounts.services.records import RecordStore
from goals_accounts.services.storage import (
    DocumentRepository,
    InMemoryAuditStorage,
    InMemoryStorage,
)


STORAGE_KEY = "test-slot"


class TickingClock:
    """Returns a timestamp one second later on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> str:
        value = format_timestamp(self.current)
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def repository(storage, audit_logger, clock):
    return DocumentRepository(
        storage=storage,
        key=STORAGE_KEY,
        audit_logger=audit_logger,
        clock=clock,
    )


@pytest.fixture
def records(repository, audit_logger):
    return RecordStore(repository, audit_logger)


@pytest.fixture
def backup_service(repository, audit_logger):
    return BackupService(repository, audit_logger=audit_logger)
