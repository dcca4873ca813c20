"""
Document Repository

Loads and saves the whole Document through a storage slot.

DESIGN DECISION: Reading NEVER fails. A missing slot, an unavailable
medium, text that is not JSON, or JSON without `goals` / `accounts`
lists all read back as an empty, freshly-timestamped Document.
Writing to an unavailable medium is a no-op.

TRADEOFFS:
- Callers never need error branches for persistence
- A corrupt document is silently replaced on the next save; there is
  no server-side copy to recover from, so the audit trail records it
"""

import json
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from goals_accounts.audit import AuditLogger
from goals_accounts.models.document import ENTRIES_KEY, GOALS_KEY, Document
from goals_accounts.models.records import utc_now_iso
from goals_accounts.services.storage.interface import (
    StorageCorruptError,
    StorageInterface,
    StorageUnavailableError,
)


DEFAULT_STORAGE_KEY = "goals-accounts-data-v1"


class DocumentRepository:
    """
    Persistence adapter for the single Document.

    Holds no copy of the Document between calls: every load reads
    the medium again.
    """

    def __init__(
        self,
        storage: Optional[StorageInterface] = None,
        key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], str] = utc_now_iso,
    ):
        """
        Args:
            storage: The storage medium. None means there is no medium:
                     loads return empty documents and saves do nothing.
            key: Slot the document lives in.
            audit_logger: Where absorbed failures are reported.
            clock: Source of timestamps (injectable for tests).
        """
        self._storage = storage
        self._key = key
        self._audit = audit_logger or AuditLogger()
        self._clock = clock

    @property
    def key(self) -> str:
        return self._key

    @property
    def available(self) -> bool:
        return self._storage is not None

    def now(self) -> str:
        return self._clock()

    def empty(self) -> Document:
        return Document.empty(self._clock())

    def load(self) -> Document:
        """
        Return the persisted Document, or an empty one.

        Never raises.
        """
        if self._storage is None:
            return self.empty()

        try:
            raw = self._storage.get_item(self._key)
        except StorageUnavailableError as e:
            self._audit.log_storage_unavailable("load", str(e))
            return self.empty()
        except StorageCorruptError as e:
            self._audit.log_document_corrupt(str(e))
            return self.empty()

        if not raw:
            return self.empty()

        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError) as e:
            self._audit.log_document_corrupt(f"Not valid JSON: {e}")
            return self.empty()

        return self._from_parsed(parsed)

    def _from_parsed(self, parsed: Any) -> Document:
        if not isinstance(parsed, dict):
            self._audit.log_document_corrupt(
                f"Top-level value is {type(parsed).__name__}, not an object"
            )
            return self.empty()

        if not isinstance(parsed.get(GOALS_KEY), list) or not isinstance(
            parsed.get(ENTRIES_KEY), list
        ):
            self._audit.log_document_corrupt(
                f"'{GOALS_KEY}' or '{ENTRIES_KEY}' is missing or not a list"
            )
            return self.empty()

        # Fill in timestamps the stored copy lacks, keep everything else
        now = self._clock()
        data = dict(parsed)
        for field in ("createdAt", "updatedAt"):
            if not isinstance(data.get(field), str) or not data[field]:
                data[field] = now

        try:
            return Document.model_validate(data)
        except PydanticValidationError as e:
            self._audit.log_document_corrupt(f"Unexpected shape: {e.error_count()} errors")
            return self.empty()

    def save(self, document: Document) -> Document:
        """
        Write the whole Document, stamping updatedAt.

        The caller's object is left untouched. Unavailable medium: no-op.

        Returns:
            The stamped copy that was written (the input itself when
            there is no medium).
        """
        if self._storage is None:
            return document

        stamped = document.model_copy(update={"updated_at": self._clock()})
        try:
            self._storage.set_item(self._key, stamped.to_json())
        except StorageUnavailableError as e:
            self._audit.log_storage_unavailable("save", str(e))
        return stamped

