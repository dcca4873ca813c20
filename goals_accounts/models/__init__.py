"""
Data Models Package

This package contains all Pydantic models used in Goals & Accounts.
"""

from goals_accounts.models.records import (
    Entry,
    EntryDraft,
    EntryType,
    EntryUpdate,
    Goal,
    GoalDraft,
    GoalStatus,
    GoalType,
    GoalUpdate,
    format_timestamp,
    normalize_timestamp,
    utc_now_iso,
)
from goals_accounts.models.document import (
    ENTRIES_KEY,
    GOALS_KEY,
    Document,
    get_record_id,
)
from goals_accounts.models.query import (
    DashboardCharts,
    DashboardData,
    DashboardSummary,
    EntryQuery,
    GoalQuery,
    MonthlyTotal,
    Pagination,
    QueryPage,
    StatusCount,
)
from goals_accounts.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from goals_accounts.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Record models
    "Entry",
    "EntryDraft",
    "EntryType",
    "EntryUpdate",
    "Goal",
    "GoalDraft",
    "GoalStatus",
    "GoalType",
    "GoalUpdate",
    "format_timestamp",
    "normalize_timestamp",
    "utc_now_iso",
    # Document
    "ENTRIES_KEY",
    "GOALS_KEY",
    "Document",
    "get_record_id",
    # Query models
    "DashboardCharts",
    "DashboardData",
    "DashboardSummary",
    "EntryQuery",
    "GoalQuery",
    "MonthlyTotal",
    "Pagination",
    "QueryPage",
    "StatusCount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
