"""Record store for goals and entries."""

from goals_accounts.services.records.builders import generate_id
from goals_accounts.services.records.store import EntryStore, GoalStore, RecordStore

__all__ = ["EntryStore", "GoalStore", "RecordStore", "generate_id"]
