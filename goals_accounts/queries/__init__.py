"""Query engine and dashboard aggregation."""

from goals_accounts.queries.collation import casefold_collation, locale_collation
from goals_accounts.queries.dashboard import DashboardService, build_dashboard
from goals_accounts.queries.executor import (
    QueryExecutionError,
    QueryExecutor,
    query_entries,
    query_goals,
)

__all__ = [
    "DashboardService",
    "QueryExecutionError",
    "QueryExecutor",
    "build_dashboard",
    "casefold_collation",
    "locale_collation",
    "query_entries",
    "query_goals",
]
