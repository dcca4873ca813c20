"""
Query and Dashboard Models

A query is a set of optional filter / sort / paging parameters
produced by the UI. The query engine turns a collection snapshot plus
one of these into a QueryPage.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from goals_accounts.models.records import format_timestamp


def _enum_value(v: Any) -> Any:
    """Let callers pass GoalType.LONG_TERM as well as 'long-term'."""
    if isinstance(v, Enum):
        return v.value
    return v


def _date_bound(v: Any) -> Any:
    """Date bounds are compared as strings against stored timestamps."""
    if isinstance(v, datetime):
        return format_timestamp(v)
    if isinstance(v, date):
        return v.isoformat()
    return v


EnumText = Annotated[Optional[str], BeforeValidator(_enum_value)]
DateBound = Annotated[Optional[str], BeforeValidator(_date_bound)]


# =============================================================================
# QUERY PARAMETERS
# =============================================================================

class GoalQuery(BaseModel):
    """Filters for the goals listing."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    type: EnumText = None
    status: EnumText = None
    sort: Optional[str] = Field(
        default=None,
        description="Field key, '-' prefix for descending (e.g. '-createdAt')"
    )
    page: Optional[int] = None
    limit: Optional[int] = None


class EntryQuery(BaseModel):
    """
    Filters for the entries listing.

    `from` is a Python keyword, so the attribute is `from_`;
    both `from` and `from_` are accepted on input.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
    )

    type: EnumText = None
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive match on person name or notes"
    )
    from_: DateBound = Field(default=None, alias="from")
    to: DateBound = None
    sort: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None


# =============================================================================
# QUERY RESULTS
# =============================================================================

class Pagination(BaseModel):
    """Where a page sits in the filtered collection."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)


class QueryPage(BaseModel):
    """
    One page of query results.

    Items are copies of stored records; changing them changes nothing.
    """

    items: list[Any] = Field(default_factory=list)
    pagination: Pagination


# =============================================================================
# DASHBOARD
# =============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class MonthlyTotal(_CamelModel):
    """One bar of a per-month chart. label is 'YYYY-MM'."""
    label: str
    value: float


class StatusCount(_CamelModel):
    status: str
    count: int = Field(ge=1)


class DashboardSummary(_CamelModel):
    total_incoming: float = 0.0
    total_outgoing: float = 0.0
    balance: float = 0.0
    pending_goals: int = 0
    completed_goals: int = 0


class DashboardCharts(_CamelModel):
    incoming_by_month: list[MonthlyTotal] = Field(default_factory=list)
    outgoing_by_month: list[MonthlyTotal] = Field(default_factory=list)
    goals_by_status: list[StatusCount] = Field(default_factory=list)


class DashboardData(_CamelModel):
    """Everything the dashboard screen shows, derived on demand."""
    summary: DashboardSummary
    charts: DashboardCharts
