"""
The Document - the single unit of persistence.

Everything the application knows lives in one JSON object:

    {"goals": [...], "accounts": [...], "createdAt": "...", "updatedAt": "..."}

The entry collection is called `entries` in Python and `accounts` on
the wire, the name earlier releases used.
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from goals_accounts.models.records import utc_now_iso


GOALS_KEY = "goals"
ENTRIES_KEY = "accounts"


def get_record_id(record: Any) -> Optional[str]:
    """
    Id of a stored record, or None for records without one.

    Backups written by the first release used `_id`; both keys are honoured.
    """
    if not isinstance(record, dict):
        return None
    value = record.get("id", record.get("_id"))
    return value if isinstance(value, str) else None


class Document(BaseModel):
    """
    In-memory shape of the whole dataset.

    Records are kept in their stored JSON form (see models.records).
    Unknown top-level keys are preserved so newer files survive a
    load/save cycle.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    goals: list[Any] = Field(default_factory=list)
    entries: list[Any] = Field(default_factory=list, alias=ENTRIES_KEY)
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def empty(cls, now: Optional[str] = None) -> "Document":
        """A fresh document with no records, both timestamps equal."""
        now = now or utc_now_iso()
        return cls(goals=[], entries=[], created_at=now, updated_at=now)

    def to_stored(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize; non-ASCII text (names, notes) is written as-is."""
        return json.dumps(self.to_stored(), indent=indent, ensure_ascii=False)
