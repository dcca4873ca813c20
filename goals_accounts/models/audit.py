"""
Audit Models for Goals & Accounts

Every mutation of the document, every backup/restore, and every
failure that the data layer absorbs instead of raising is recorded
as an audit event. Absorbed failures (unavailable storage, a corrupt
document) would otherwise leave no trace at all.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Goals
    GOAL_CREATED = "goal_created"
    GOAL_UPDATED = "goal_updated"
    GOAL_DELETED = "goal_deleted"

    # Entries
    ENTRY_CREATED = "entry_created"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_DELETED = "entry_deleted"

    # Update/delete aimed at an id that is not in the collection
    RECORD_NOT_FOUND = "record_not_found"

    # Backup / restore
    BACKUP_EXPORTED = "backup_exported"
    RESTORE_COMPLETED = "restore_completed"
    RESTORE_REJECTED = "restore_rejected"

    # Absorbed persistence failures
    STORAGE_UNAVAILABLE = "storage_unavailable"
    DOCUMENT_CORRUPT = "document_corrupt"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_EVENT_TYPES = {
    ("goal", "created"): AuditEventType.GOAL_CREATED,
    ("goal", "updated"): AuditEventType.GOAL_UPDATED,
    ("goal", "deleted"): AuditEventType.GOAL_DELETED,
    ("entry", "created"): AuditEventType.ENTRY_CREATED,
    ("entry", "updated"): AuditEventType.ENTRY_UPDATED,
    ("entry", "deleted"): AuditEventType.ENTRY_DELETED,
}


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="'goal', 'entry' or 'document'"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Record id; ids are opaque strings"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

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
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created("goal", goal.id, "Save for a car")
        event = AuditEventBuilder.restore_rejected(["goals is not a list"])
    """

    @staticmethod
    def record_created(
        entity_type: str,
        record_id: str,
        label: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_EVENT_TYPES[(entity_type, "created")],
            entity_type=entity_type,
            entity_id=record_id,
            description=f"{entity_type.capitalize()} created: {label}"[:500],
            details={"label": label},
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        record_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_EVENT_TYPES[(entity_type, "updated")],
            entity_type=entity_type,
            entity_id=record_id,
            description=f"{entity_type.capitalize()} updated ({len(fields)} fields)",
            details={"fields": fields},
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        record_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_EVENT_TYPES[(entity_type, "deleted")],
            entity_type=entity_type,
            entity_id=record_id,
            description=f"{entity_type.capitalize()} deleted",
        )

    @staticmethod
    def record_not_found(
        entity_type: str,
        record_id: str,
        operation: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            entity_id=record_id,
            description=f"{operation.capitalize()} ignored: no {entity_type} with this id",
            details={"operation": operation},
        )

    @staticmethod
    def backup_exported(
        goal_count: int,
        entry_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORTED,
            entity_type="document",
            description=f"Backup exported: {goal_count} goals, {entry_count} entries",
            details={"goals": goal_count, "entries": entry_count},
        )

    @staticmethod
    def restore_completed(
        goal_count: int,
        entry_count: int,
        warnings: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESTORE_COMPLETED,
            severity=AuditSeverity.WARNING if warnings else AuditSeverity.INFO,
            entity_type="document",
            description=f"Data restored: {goal_count} goals, {entry_count} entries",
            details={
                "goals": goal_count,
                "entries": entry_count,
                "warnings": warnings,
            },
        )

    @staticmethod
    def restore_rejected(
        issues: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESTORE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            description=f"Restore rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def storage_unavailable(
        operation: str,
        error_message: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            description=f"Storage unavailable during {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def document_corrupt(
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_CORRUPT,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            description="Stored document unreadable, starting from an empty one",
            details={"reason": reason},
        )
