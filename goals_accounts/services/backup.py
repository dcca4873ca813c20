"""
Backup / Restore

DESIGN DECISION: A backup is the whole Document, pretty-printed.
A restore replaces the whole Document; nothing is merged.

Restore flow:
1. Validate the text (BackupValidator, two stages)
2. Shape failure -> ValidationError, storage untouched
3. Build the new Document (createdAt kept from the file, updatedAt now)
4. Save it in one write
"""

import copy
from datetime import datetime, timezone
from typing import Optional

from goals_accounts.audit import AuditLogger
from goals_accounts.models.document import ENTRIES_KEY, GOALS_KEY, Document
from goals_accounts.services.storage.repository import DocumentRepository
from goals_accounts.validation.validator import BackupValidator, ValidationError


BACKUP_FILENAME_PREFIX = "goals-accounts-backup"

# Keys (wire and Python spellings) that the restore sets itself
_DOCUMENT_KEYS = {
    GOALS_KEY, ENTRIES_KEY, "entries",
    "createdAt", "created_at", "updatedAt", "updated_at",
}


def backup_filename(now: Optional[datetime] = None) -> str:
    """
    Name for a downloaded backup, e.g.
    'goals-accounts-backup-2024-01-15-10-30-00.json'.
    """
    now = now or datetime.now(timezone.utc)
    return f"{BACKUP_FILENAME_PREFIX}-{now.strftime('%Y-%m-%d-%H-%M-%S')}.json"


class BackupService:
    """Serializes the Document to backup text and restores it back."""

    def __init__(
        self,
        repository: DocumentRepository,
        validator: Optional[BackupValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._validator = validator or BackupValidator()
        self._audit = audit_logger or AuditLogger()

    def backup(self) -> str:
        """The current Document as 2-space-indented JSON."""
        document = self._repository.load()
        self._audit.log_backup_exported(len(document.goals), len(document.entries))
        return document.to_json(indent=2)

    def restore(self, text: str) -> Document:
        """
        Replace the stored Document with the one in `text`.

        Records inside the file are admitted as they are; records that
        do not match the schema are reported in the audit trail.

        Raises:
            ValidationError: The text is not JSON, not an object, or lacks
                `goals` / `accounts` lists. Nothing is written.
        """
        parsed, result = self._validator.validate(text)

        if parsed is None:
            messages = [issue.message for issue in result.issues]
            self._audit.log_restore_rejected(messages)
            raise ValidationError(
                self._validator.get_user_friendly_summary(result),
                result.issues,
            )

        now = self._repository.now()
        created_at = parsed.get("createdAt")
        extras = {
            key: copy.deepcopy(value)
            for key, value in parsed.items()
            if key not in _DOCUMENT_KEYS
        }

        document = Document.model_validate({
            **extras,
            GOALS_KEY: copy.deepcopy(parsed[GOALS_KEY]),
            ENTRIES_KEY: copy.deepcopy(parsed[ENTRIES_KEY]),
            "createdAt": created_at if isinstance(created_at, str) and created_at else now,
            "updatedAt": now,
        })
        document = self._repository.save(document)

        self._audit.log_restore_completed(
            result.goal_count, result.entry_count, result.warnings
        )
        return document
