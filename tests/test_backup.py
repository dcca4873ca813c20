"""Tests for backup, restore and backup validation."""

import json
from datetime import datetime

import pytest

from goals_accounts.audit import AuditLogger
from goals_accounts.models.audit import AuditEventType, AuditSeverity
from goals_accounts.services.backup import BackupService, backup_filename
from goals_accounts.services.records import RecordStore
from goals_accounts.services.storage import DocumentRepository, InMemoryStorage
from goals_accounts.validation import BackupValidator, ValidationError


def backup_text(goals=None, accounts=None, **extra):
    data = {"goals": goals or [], "accounts": accounts or []}
    data.update(extra)
    return json.dumps(data)


class TestBackup:
    """Tests for BackupService.backup."""

    def test_backup_is_pretty_json(self, records, backup_service):
        """Test that the backup is 2-space indented and complete."""
        records.goals.create({"title": "Save"})
        text = backup_service.backup()

        assert text.startswith('{\n  "goals"')
        parsed = json.loads(text)
        assert parsed["goals"][0]["title"] == "Save"
        assert parsed["accounts"] == []

    def test_backup_keeps_non_ascii(self, records, backup_service):
        """Test that Arabic names are written unescaped."""
        records.entries.create({"personName": "أحمد", "amount": 10})
        assert "أحمد" in backup_service.backup()

    def test_backup_is_audited(self, backup_service, audit_storage):
        """Test that exporting a backup leaves an audit event."""
        backup_service.backup()
        event = audit_storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.BACKUP_EXPORTED

    def test_backup_filename(self):
        """Test the timestamped file name."""
        name = backup_filename(datetime(2024, 1, 15, 10, 30, 0))
        assert name == "goals-accounts-backup-2024-01-15-10-30-00.json"


class TestRestore:
    """Tests for BackupService.restore."""

    def test_backup_restore_equivalence(self, records, backup_service, clock):
        """Test that restoring a backup elsewhere reproduces the collections."""
        records.goals.create({"title": "Save", "deadline": "2024-06-30"})
        records.entries.create({"personName": "Ali", "amount": 100})
        records.entries.create({"personName": "Mona", "amount": 5, "type": "outgoing"})
        text = backup_service.backup()

        other_repository = DocumentRepository(InMemoryStorage(), clock=clock)
        BackupService(other_repository).restore(text)

        other = RecordStore(other_repository)
        assert other.goals.list() == records.goals.list()
        assert other.entries.list() == records.entries.list()

    def test_restore_replaces_everything(self, records, backup_service):
        """Test that a restore does not merge with existing records."""
        records.goals.create({"title": "Gone after restore"})
        backup_service.restore(backup_text(goals=[{"id": "g1", "title": "Restored"}]))
        assert [g["title"] for g in records.goals.list()] == ["Restored"]

    def test_restore_timestamps(self, backup_service, clock):
        """Test that createdAt is kept from the file and updatedAt is now."""
        doc = backup_service.restore(backup_text(
            createdAt="2023-05-01T00:00:00.000Z",
            updatedAt="2023-05-02T00:00:00.000Z",
        ))
        assert doc.created_at == "2023-05-01T00:00:00.000Z"
        assert doc.updated_at > "2024-01-01"

    def test_restore_without_created_at(self, backup_service):
        """Test that a missing createdAt is set to now."""
        doc = backup_service.restore(backup_text())
        assert doc.created_at == "2024-01-15T10:30:00.000Z"
        assert doc.updated_at >= doc.created_at

    def test_restore_returns_what_was_stored(self, backup_service, storage, repository):
        """Test that the returned document carries the persisted updatedAt."""
        doc = backup_service.restore(backup_text(goals=[{"id": "g1", "title": "Save"}]))
        stored = json.loads(storage.get_item(repository.key))
        assert doc.updated_at == stored["updatedAt"]
        assert doc.to_stored() == stored

    def test_deeply_nested_json_is_rejected(self, backup_service, storage, repository):
        """Test that JSON nested beyond the parser's limit is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            backup_service.restore('{"goals": ' + "[" * 200000)

        assert exc_info.value.issues[0].issue_type == "invalid_json"
        assert storage.get_item(repository.key) is None

    def test_restore_is_lenient(self, records, backup_service, audit_storage):
        """Test that schema-violating records are admitted with a warning."""
        backup_service.restore(backup_text(
            goals=[{"id": "g1", "title": ""}],
            accounts=[{"id": "e1", "personName": "Ali", "amount": -3}],
        ))

        assert records.goals.get("g1") == {"id": "g1", "title": ""}
        assert records.entries.get("e1")["amount"] == -3

        event = audit_storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.RESTORE_COMPLETED
        assert event.severity == AuditSeverity.WARNING
        assert len(event.details["warnings"]) == 2

    @pytest.mark.parametrize("text", [
        "{not json",
        "[]",
        '"just a string"',
        json.dumps({"goals": []}),
        json.dumps({"goals": {}, "accounts": []}),
        json.dumps({"goals": [], "accounts": "none"}),
    ])
    def test_invalid_restore_leaves_storage_untouched(
        self, records, backup_service, storage, repository, text
    ):
        """Test that a rejected restore raises and changes no stored byte."""
        records.goals.create({"title": "Keep me"})
        before = storage.get_item(repository.key)

        with pytest.raises(ValidationError) as exc_info:
            backup_service.restore(text)

        assert exc_info.value.message.startswith("The backup file is invalid")
        assert exc_info.value.issues
        assert storage.get_item(repository.key) == before

    def test_rejected_restore_is_audited(self, backup_service, audit_storage):
        """Test that a rejected restore leaves an audit event."""
        with pytest.raises(ValidationError):
            backup_service.restore("[]")
        event = audit_storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.RESTORE_REJECTED

    def test_restore_keeps_unknown_keys(self, backup_service, storage, repository):
        """Test that extra top-level keys in a backup are kept."""
        backup_service.restore(backup_text(version=3))
        assert json.loads(storage.get_item(repository.key))["version"] == 3


class TestBackupValidator:
    """Tests for the two-stage backup validator."""

    def test_valid_backup(self):
        """Test that a clean backup passes without warnings."""
        parsed, result = BackupValidator().validate(backup_text())
        assert parsed is not None
        assert result.is_valid
        assert result.warnings == []

    def test_missing_collections_listed(self):
        """Test that both missing collections are reported."""
        parsed, result = BackupValidator().validate("{}")
        assert parsed is None
        assert {issue.field for issue in result.issues} == {"goals", "accounts"}

    def test_duplicate_ids_warned(self):
        """Test that repeated ids are reported as warnings."""
        record = {
            "id": "g1",
            "title": "Save",
            "type": "short-term",
            "status": "pending",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
        }
        _, result = BackupValidator().validate(backup_text(goals=[record, dict(record)]))
        assert result.is_valid
        assert [i.issue_type for i in result.issues] == ["duplicate_id"]

    def test_non_object_record_warned(self):
        """Test that a non-object record is a warning, not an error."""
        _, result = BackupValidator().validate(backup_text(accounts=[42]))
        assert result.is_valid
        assert result.issues[0].issue_type == "not_an_object"

    def test_warnings_are_capped(self):
        """Test that a very noisy file produces a bounded warning list."""
        _, result = BackupValidator().validate(backup_text(goals=[{}] * 30))
        assert len(result.issues) == 30
        assert len(result.warnings) == 21
        assert result.warnings[-1] == "... and 10 more"

    def test_summary_message(self):
        """Test the user-facing summary for a rejected file."""
        validator = BackupValidator()
        _, result = validator.validate("[]")
        summary = validator.get_user_friendly_summary(result)
        assert summary == "The backup file is invalid: File does not contain a JSON object"


class TestAuditLoggerIntegration:
    """Tests for audit wiring in the backup flow."""

    def test_default_audit_logger_is_local_only(self, repository):
        """Test that a service built without a logger still works."""
        service = BackupService(repository)
        assert isinstance(json.loads(service.backup()), dict)
        assert AuditLogger().storage is None
