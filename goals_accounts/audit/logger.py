"""
Audit Logger

DESIGN DECISION: Every mutation of the document is logged, and so is
every failure the data layer swallows on purpose (unavailable storage,
a corrupt document). This provides:
1. Complete traceability
2. Debugging capability when data "disappears"
3. A place to surface records admitted by a lenient restore

The audit logger:
- Always logs locally through structlog
- Gracefully handles failures (never breaks a save because logging failed)
"""

import logging
from typing import TYPE_CHECKING, Optional

import structlog

from goals_accounts.models.audit import AuditEvent, AuditEventBuilder

if TYPE_CHECKING:
    from goals_accounts.services.storage.interface import AuditStorageInterface


PACKAGE_LOGGER = "goals_accounts"


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def setup_logging(level: str = "INFO") -> None:
    """
    Route the package's structlog output to stderr at the given level.

    structlog renders the JSON line; the stdlib handler only prints it.
    Only the "goals_accounts" logger is touched, never the root logger.
    Safe to call more than once.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional["AuditStorageInterface"] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("goals_accounts.audit")

    @property
    def storage(self) -> Optional["AuditStorageInterface"]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()
        severity = event.severity.value

        if severity in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif severity == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif severity == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_record_created(
        self,
        entity_type: str,
        record_id: str,
        label: str,
    ) -> None:
        """Log creation of a goal or entry."""
        self.log(AuditEventBuilder.record_created(entity_type, record_id, label))

    def log_record_updated(
        self,
        entity_type: str,
        record_id: str,
        fields: list[str],
    ) -> None:
        """Log an update, naming the fields that were provided."""
        self.log(AuditEventBuilder.record_updated(entity_type, record_id, fields))

    def log_record_deleted(
        self,
        entity_type: str,
        record_id: str,
    ) -> None:
        self.log(AuditEventBuilder.record_deleted(entity_type, record_id))

    def log_record_not_found(
        self,
        entity_type: str,
        record_id: str,
        operation: str,
    ) -> None:
        """Log an update/delete that matched nothing (not an error)."""
        self.log(AuditEventBuilder.record_not_found(entity_type, record_id, operation))

    def log_backup_exported(
        self,
        goal_count: int,
        entry_count: int,
    ) -> None:
        self.log(AuditEventBuilder.backup_exported(goal_count, entry_count))

    def log_restore_completed(
        self,
        goal_count: int,
        entry_count: int,
        warnings: list[str],
    ) -> None:
        self.log(AuditEventBuilder.restore_completed(goal_count, entry_count, warnings))

    def log_restore_rejected(
        self,
        issues: list[str],
    ) -> None:
        self.log(AuditEventBuilder.restore_rejected(issues))

    def log_storage_unavailable(
        self,
        operation: str,
        error_message: Optional[str] = None,
    ) -> None:
        """Log a read/write the repository absorbed because the medium failed."""
        self.log(AuditEventBuilder.storage_unavailable(operation, error_message))

    def log_document_corrupt(
        self,
        reason: str,
    ) -> None:
        self.log(AuditEventBuilder.document_corrupt(reason))

