"""
Two-Stage Backup Validation

DESIGN DECISION: A restore replaces everything, so the incoming file is
checked before anything is written. Validation happens in two stages:

STAGE 1 - SHAPE (blocking):
- The text parses as JSON
- The top-level value is an object
- `goals` and `accounts` are both lists

STAGE 2 - RECORDS (never blocking):
- Each goal / entry is checked against its schema
- Duplicate ids are detected
- Problems are reported as warnings only

WHY RECORDS DON'T BLOCK:
A restore is lenient on purpose: a file written by a newer or older
release must still load. The cost is that a record which violates the
schema can enter the live dataset, so every such record is reported.
"""

import json
from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from goals_accounts.models.document import ENTRIES_KEY, GOALS_KEY, get_record_id
from goals_accounts.models.records import Entry, Goal
from goals_accounts.models.validation import ValidationIssue, ValidationResult


MAX_RECORD_WARNINGS = 20


class ValidationError(Exception):
    """
    Input was rejected before it reached the stored document.

    `message` is meant to be shown to the user as-is.
    """

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.message = message
        self.issues = issues or []


class RecordValidationError(ValidationError):
    """A create/update payload does not fit the record schema."""

    @classmethod
    def from_pydantic(
        cls,
        entity_type: str,
        error: PydanticValidationError,
    ) -> "RecordValidationError":
        issues = [
            ValidationIssue(
                field=".".join(str(part) for part in err["loc"]) or entity_type,
                issue_type=err["type"],
                message=err["msg"],
                severity="error",
            )
            for err in error.errors()
        ]
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        return cls(f"Invalid {entity_type}: {summary}", issues)


class BackupValidator:
    """
    Validates backup text through a two-stage pipeline.

    Stage 1 decides whether the restore may happen at all.
    Stage 2 only describes what is about to be admitted.
    """

    def _validate_shape(
        self,
        text: str,
    ) -> tuple[Optional[dict], list[ValidationIssue]]:
        """
        Stage 1: Shape validation.

        Returns: (parsed_object_or_None, list_of_issues)
        """
        try:
            parsed = json.loads(text)
        except (TypeError, ValueError, RecursionError) as e:
            return None, [ValidationIssue(
                field="$",
                issue_type="invalid_json",
                message=f"File is not valid JSON ({e})",
                severity="error",
            )]

        if not isinstance(parsed, dict):
            return None, [ValidationIssue(
                field="$",
                issue_type="not_an_object",
                message="File does not contain a JSON object",
                severity="error",
            )]

        issues = []
        for key in (GOALS_KEY, ENTRIES_KEY):
            if key not in parsed:
                issues.append(ValidationIssue(
                    field=key,
                    issue_type="missing",
                    message=f"'{key}' is missing",
                    severity="error",
                ))
            elif not isinstance(parsed[key], list):
                issues.append(ValidationIssue(
                    field=key,
                    issue_type="not_a_list",
                    message=f"'{key}' is not a list",
                    severity="error",
                ))

        if issues:
            return None, issues
        return parsed, []

    def _validate_records(
        self,
        key: str,
        records: list[Any],
        schema: type[BaseModel],
    ) -> list[ValidationIssue]:
        """Stage 2: per-record schema checks, reported as warnings."""
        issues = []
        seen: set[str] = set()

        for index, record in enumerate(records):
            path = f"{key}[{index}]"
            if not isinstance(record, dict):
                issues.append(ValidationIssue(
                    field=path,
                    issue_type="not_an_object",
                    message=f"{path} is not an object",
                    severity="warning",
                ))
                continue

            try:
                schema.model_validate(record)
            except PydanticValidationError as e:
                fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
                issues.append(ValidationIssue(
                    field=path,
                    issue_type="schema_mismatch",
                    message=f"{path} does not match the schema ({', '.join(fields) or 'record'})",
                    severity="warning",
                ))

            rid = get_record_id(record)
            if rid is not None:
                if rid in seen:
                    issues.append(ValidationIssue(
                        field=path,
                        issue_type="duplicate_id",
                        message=f"{path} repeats id {rid}",
                        severity="warning",
                    ))
                seen.add(rid)

        return issues

    def validate(
        self,
        text: str,
    ) -> tuple[Optional[dict], ValidationResult]:
        """
        Run the full two-stage validation pipeline.

        Returns:
            (parsed_object, result). parsed_object is None when stage 1 failed.
        """
        parsed, shape_issues = self._validate_shape(text)
        if parsed is None:
            return None, ValidationResult(shape_valid=False, issues=shape_issues)

        record_issues = (
            self._validate_records(GOALS_KEY, parsed[GOALS_KEY], Goal)
            + self._validate_records(ENTRIES_KEY, parsed[ENTRIES_KEY], Entry)
        )

        warnings = [issue.message for issue in record_issues[:MAX_RECORD_WARNINGS]]
        if len(record_issues) > MAX_RECORD_WARNINGS:
            warnings.append(f"... and {len(record_issues) - MAX_RECORD_WARNINGS} more")

        return parsed, ValidationResult(
            shape_valid=True,
            issues=record_issues,
            warnings=warnings,
            goal_count=len(parsed[GOALS_KEY]),
            entry_count=len(parsed[ENTRIES_KEY]),
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """One line suitable for a toast / error banner."""
        if result.is_valid:
            if result.warnings:
                return f"Backup accepted with {len(result.issues)} record warnings."
            return "Backup accepted."

        reasons = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        return f"The backup file is invalid: {reasons}"
