"""Validation package."""

from goals_accounts.validation.validator import (
    BackupValidator,
    RecordValidationError,
    ValidationError,
)

__all__ = ["BackupValidator", "RecordValidationError", "ValidationError"]
