"""
Record Models for Goals & Accounts

These models define the schemas for the two record collections:
goals, and entries (money coming in from / going out to a person).

They are designed to:
1. Trim and bound every free-text field at the edge
2. Serialize to the camelCase JSON shape kept in storage
3. Keep create input, update patches, and stored records distinct

DESIGN DECISION: Stored records are plain JSON objects inside the
Document. These models are applied when records are created or
updated, never when they are read back, so a record admitted by a
lenient restore is kept exactly as it arrived.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# TIMESTAMPS
# =============================================================================

def format_timestamp(value: datetime) -> str:
    """
    Render a datetime as a fixed-width UTC ISO-8601 string.

    Naive datetimes are taken to already be in UTC.
    Example: 2024-01-15T10:30:00.000Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Current time as a stored timestamp string."""
    return format_timestamp(datetime.now(timezone.utc))


def normalize_timestamp(value: Any) -> Optional[str]:
    """
    Coerce a date-ish input into the stored timestamp format.

    Accepts date, datetime, or an ISO-8601 string. A plain date means
    midnight UTC. Blank strings and None mean "not given".
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return format_timestamp(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"'{text}' is not an ISO-8601 date")
        return format_timestamp(parsed)
    raise ValueError(f"Expected a date or ISO-8601 string, got {type(value).__name__}")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class GoalType(str, Enum):
    """Goal horizon. SHORT_TERM is the default for new goals."""
    SHORT_TERM = "short-term"
    LONG_TERM = "long-term"


class GoalStatus(str, Enum):
    """Goal progress. PENDING is the default for new goals."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EntryType(str, Enum):
    """
    Direction of money for an entry.

    INCOMING: the person owes / paid us. OUTGOING: we owe / paid them.
    INCOMING is the default for new entries.
    """
    INCOMING = "incoming"
    OUTGOING = "outgoing"


# =============================================================================
# BASE
# =============================================================================

class RecordModel(BaseModel):
    """
    Shared configuration for record schemas.

    Fields are snake_case in Python and camelCase on the wire;
    either spelling is accepted on input. Unknown keys are dropped.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_stored(self) -> dict[str, Any]:
        """Serialize to the JSON object kept inside the Document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# GOALS
# =============================================================================

class Goal(RecordModel):
    """A goal as stored. Built by the record store, never by callers."""

    id: str = Field(..., min_length=1, description="Unique, immutable id")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    type: GoalType
    deadline: Optional[str] = Field(
        default=None,
        description="ISO timestamp; absent when the goal has no deadline"
    )
    status: GoalStatus
    created_at: str
    updated_at: str

    @field_validator('deadline', mode='before')
    @classmethod
    def normalize_deadline(cls, v: Any) -> Optional[str]:
        return normalize_timestamp(v)


class GoalDraft(RecordModel):
    """
    Input for creating a goal.

    Only the title is required. Missing optional values are filled in
    by the record store, which is the single place defaults live.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    type: Optional[GoalType] = None
    deadline: Optional[str] = None
    status: Optional[GoalStatus] = None

    @field_validator('deadline', mode='before')
    @classmethod
    def normalize_deadline(cls, v: Any) -> Optional[str]:
        return normalize_timestamp(v)


class GoalUpdate(RecordModel):
    """
    Patch for an existing goal.

    Only fields explicitly present in the input are applied
    (see `model_fields_set`). Passing deadline=None clears it.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    type: Optional[GoalType] = None
    deadline: Optional[str] = None
    status: Optional[GoalStatus] = None

    @field_validator('deadline', mode='before')
    @classmethod
    def normalize_deadline(cls, v: Any) -> Optional[str]:
        return normalize_timestamp(v)


# =============================================================================
# ENTRIES
# =============================================================================

class Entry(RecordModel):
    """A financial entry as stored."""

    id: str = Field(..., min_length=1, description="Unique, immutable id")
    person_name: str = Field(..., min_length=1, max_length=150)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    phone: str = Field(default="", max_length=20)
    type: EntryType
    notes: str = Field(default="", max_length=1000)
    date: str
    created_at: str
    updated_at: str

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Optional[str]:
        return normalize_timestamp(v)


class EntryDraft(RecordModel):
    """Input for creating an entry. Only the person's name is required."""

    person_name: str = Field(..., min_length=1, max_length=150)
    amount: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    phone: Optional[str] = Field(default=None, max_length=20)
    type: Optional[EntryType] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    date: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Optional[str]:
        return normalize_timestamp(v)


class EntryUpdate(RecordModel):
    """Patch for an existing entry. Only explicitly given fields apply."""

    person_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    amount: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    phone: Optional[str] = Field(default=None, max_length=20)
    type: Optional[EntryType] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    date: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Optional[str]:
        return normalize_timestamp(v)
