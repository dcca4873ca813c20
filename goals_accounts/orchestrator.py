"""
Main Orchestrator for Goals & Accounts

This module ties together all the components:
1. Storage medium (chosen by settings)
2. Document repository
3. Record store (goals, entries)
4. Query executor and dashboard
5. Backup / restore

DESIGN DECISION: Every component receives the SAME repository and
audit logger. The repository holds no state of its own, so all
components read and write one Document through one slot.

A UI layer (or a test) only needs `create_app_components()`.
"""

from typing import Optional

import structlog

from goals_accounts.audit import AuditLogger, setup_logging
from goals_accounts.config import AppSettings, StorageSettings, get_settings
from goals_accounts.queries import DashboardService, QueryExecutor
from goals_accounts.queries.collation import casefold_collation, locale_collation
from goals_accounts.services.backup import BackupService
from goals_accounts.services.records import RecordStore
from goals_accounts.services.storage import (
    AuditStorageInterface,
    DocumentRepository,
    FileStorage,
    InMemoryAuditStorage,
    InMemoryStorage,
    StorageInterface,
)
from goals_accounts.validation import BackupValidator


logger = structlog.get_logger(__name__)


class AppComponents:
    """Everything a caller needs, wired to one repository."""

    def __init__(
        self,
        repository: DocumentRepository,
        records: RecordStore,
        queries: QueryExecutor,
        dashboard: DashboardService,
        backup: BackupService,
        audit_logger: AuditLogger,
    ):
        self.repository = repository
        self.records = records
        self.queries = queries
        self.dashboard = dashboard
        self.backup = backup
        self.audit_logger = audit_logger


def create_storage(settings: StorageSettings) -> Optional[StorageInterface]:
    """
    Build the storage medium named by `settings.backend`.

    'none' yields no medium: the app runs, but nothing persists.
    """
    if settings.backend == "file":
        return FileStorage(settings.data_dir)
    if settings.backend == "memory":
        return InMemoryStorage()
    return None


def create_app_components(
    storage_settings: Optional[StorageSettings] = None,
    app_settings: Optional[AppSettings] = None,
    storage: Optional[StorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage_settings: Defaults to get_settings().storage.
        app_settings: Defaults to get_settings().app.
        storage: Use this medium instead of the one the settings name.
        audit_storage: Where audit events are kept. Defaults to an
                       in-memory history sized by the settings.

    Returns:
        AppComponents
    """
    settings = None
    if storage_settings is None or app_settings is None:
        settings = get_settings()
    storage_settings = storage_settings or settings.storage
    app_settings = app_settings or settings.app

    setup_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)

    if storage is None:
        storage = create_storage(storage_settings)
        if storage is None:
            logger.warning("storage_disabled", backend=storage_settings.backend)

    audit_logger = AuditLogger(
        audit_storage or InMemoryAuditStorage(max_events=app_settings.audit_history_size)
    )

    collation = (
        locale_collation(app_settings.collation_locale)
        if app_settings.collation_locale
        else casefold_collation
    )

    repository = DocumentRepository(
        storage=storage,
        key=storage_settings.key,
        audit_logger=audit_logger,
    )
    records = RecordStore(repository, audit_logger)

    return AppComponents(
        repository=repository,
        records=records,
        queries=QueryExecutor(records, collation, app_settings.default_page_limit),
        dashboard=DashboardService(repository),
        backup=BackupService(repository, BackupValidator(), audit_logger),
        audit_logger=audit_logger,
    )
