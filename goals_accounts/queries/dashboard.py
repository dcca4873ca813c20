"""
Dashboard Aggregation

Derived, read-only figures rebuilt from the whole Document on every
call. Nothing is maintained incrementally.
"""

from datetime import datetime
from typing import Any, Optional

from goals_accounts.models.document import Document
from goals_accounts.models.query import (
    DashboardCharts,
    DashboardData,
    DashboardSummary,
    MonthlyTotal,
    StatusCount,
)
from goals_accounts.models.records import EntryType, GoalStatus


_OPEN_STATUSES = {GoalStatus.PENDING.value, GoalStatus.IN_PROGRESS.value}


def _amount(entry: dict) -> float:
    value = entry.get("amount")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _month_key(value: Any) -> Optional[str]:
    """'YYYY-MM' of a stored date, or None when it does not parse."""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def _series(buckets: dict[str, float]) -> list[MonthlyTotal]:
    return [MonthlyTotal(label=label, value=buckets[label]) for label in sorted(buckets)]


def build_dashboard(document: Document) -> DashboardData:
    """
    Summarize both collections.

    - Totals count only entries typed exactly incoming / outgoing
    - Monthly charts put every non-incoming entry in the outgoing series
    - goalsByStatus lists statuses in the order they are first seen
    """
    entries = [e for e in document.entries if isinstance(e, dict)]
    goals = [g for g in document.goals if isinstance(g, dict)]

    total_incoming = sum(_amount(e) for e in entries if e.get("type") == EntryType.INCOMING.value)
    total_outgoing = sum(_amount(e) for e in entries if e.get("type") == EntryType.OUTGOING.value)

    incoming_by_month: dict[str, float] = {}
    outgoing_by_month: dict[str, float] = {}
    for entry in entries:
        key = _month_key(entry.get("date"))
        if key is None:
            continue
        buckets = (
            incoming_by_month
            if entry.get("type") == EntryType.INCOMING.value
            else outgoing_by_month
        )
        buckets[key] = buckets.get(key, 0.0) + _amount(entry)

    status_counts: dict[str, int] = {}
    for goal in goals:
        status = goal.get("status")
        if isinstance(status, str):
            status_counts[status] = status_counts.get(status, 0) + 1

    summary = DashboardSummary(
        total_incoming=total_incoming,
        total_outgoing=total_outgoing,
        balance=total_incoming - total_outgoing,
        pending_goals=sum(1 for g in goals if g.get("status") in _OPEN_STATUSES),
        completed_goals=sum(
            1 for g in goals if g.get("status") == GoalStatus.COMPLETED.value
        ),
    )
    charts = DashboardCharts(
        incoming_by_month=_series(incoming_by_month),
        outgoing_by_month=_series(outgoing_by_month),
        goals_by_status=[
            StatusCount(status=status, count=count)
            for status, count in status_counts.items()
        ],
    )
    return DashboardData(summary=summary, charts=charts)


class DashboardService:
    """Builds the dashboard from whatever the repository holds right now."""

    def __init__(self, repository):
        self._repository = repository

    def get(self) -> DashboardData:
        return build_dashboard(self._repository.load())
