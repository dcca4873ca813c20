"""
Record construction and merging.

DESIGN DECISION: Defaults and updates are spelled out field by field
for each record type instead of a generic dict merge:
- The record store is the single source of truth for defaults
  (a form's default is not enough for programmatic callers)
- Every field an update may touch is listed here; anything else in a
  patch (id, createdAt, unknown keys) cannot reach the stored record
"""

import random
import time
import uuid

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
)


_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate a unique id for a new record.

    uuid4 draws on the OS randomness source. Platforms without one get
    a random part plus a millisecond clock part, e.g. 'id_3k9x..._lr5c...'.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return f"id_{_base36(random.getrandbits(52))}_{_base36(time.time_ns() // 1_000_000)}"


# =============================================================================
# GOALS
# =============================================================================

def build_goal(draft: GoalDraft, record_id: str, now: str) -> Goal:
    """
    Turn a validated draft into a complete Goal.

    Defaults: type short-term, status pending, description "".
    A missing deadline stays missing.
    """
    return Goal(
        id=record_id,
        title=draft.title,
        description=draft.description or "",
        type=draft.type or GoalType.SHORT_TERM,
        deadline=draft.deadline,
        status=draft.status or GoalStatus.PENDING,
        created_at=now,
        updated_at=now,
    )


def merge_goal(current: dict, patch: GoalUpdate, now: str) -> dict:
    """Apply the fields explicitly set on `patch` to a stored goal."""
    merged = dict(current)
    provided = patch.model_fields_set

    if "title" in provided and patch.title is not None:
        merged["title"] = patch.title
    if "description" in provided:
        merged["description"] = patch.description or ""
    if "type" in provided and patch.type is not None:
        merged["type"] = patch.type.value
    if "deadline" in provided:
        if patch.deadline is None:
            merged.pop("deadline", None)
        else:
            merged["deadline"] = patch.deadline
    if "status" in provided and patch.status is not None:
        merged["status"] = patch.status.value

    merged["updatedAt"] = now
    return merged


# =============================================================================
# ENTRIES
# =============================================================================

def build_entry(draft: EntryDraft, record_id: str, now: str) -> Entry:
    """
    Turn a validated draft into a complete Entry.

    Defaults: type incoming, amount 0, date now, phone/notes "".
    """
    return Entry(
        id=record_id,
        person_name=draft.person_name,
        amount=draft.amount if draft.amount is not None else 0.0,
        phone=draft.phone or "",
        type=draft.type or EntryType.INCOMING,
        notes=draft.notes or "",
        date=draft.date or now,
        created_at=now,
        updated_at=now,
    )


def merge_entry(current: dict, patch: EntryUpdate, now: str) -> dict:
    """Apply the fields explicitly set on `patch` to a stored entry."""
    merged = dict(current)
    provided = patch.model_fields_set

    if "person_name" in provided and patch.person_name is not None:
        merged["personName"] = patch.person_name
    if "amount" in provided and patch.amount is not None:
        merged["amount"] = patch.amount
    if "phone" in provided:
        merged["phone"] = patch.phone or ""
    if "type" in provided and patch.type is not None:
        merged["type"] = patch.type.value
    if "notes" in provided:
        merged["notes"] = patch.notes or ""
    if "date" in provided and patch.date is not None:
        merged["date"] = patch.date

    merged["updatedAt"] = now
    return merged
