"""
Record Store

Create / update / delete / get / list for the two record collections.

DESIGN DECISION: Every operation is a full load-modify-save cycle on
the Document. No record is cached between calls, so two components
sharing a storage medium always see each other's writes.

- Unknown ids on update/delete are not errors (audited, then ignored)
- Reads hand out deep copies; mutating them never touches the Document
- New records go to the front of their collection
"""

import copy
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from goals_accounts.audit import AuditLogger
from goals_accounts.models.document import Document, get_record_id
from goals_accounts.models.records import (
    Entry,
    EntryDraft,
    EntryUpdate,
    Goal,
    GoalDraft,
    GoalUpdate,
)
from goals_accounts.services.records.builders import (
    build_entry,
    build_goal,
    generate_id,
    merge_entry,
    merge_goal,
)
from goals_accounts.services.storage.repository import DocumentRepository
from goals_accounts.validation.validator import RecordValidationError


Payload = Union[BaseModel, Mapping[str, Any]]


class _CollectionStore:
    """
    Shared load-modify-save logic for one collection of the Document.

    Subclasses name the collection and supply the schemas plus the
    build/merge functions.
    """

    entity_type: str = ""
    collection: str = ""
    draft_schema: type[BaseModel]
    update_schema: type[BaseModel]

    def __init__(
        self,
        repository: DocumentRepository,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._repository = repository
        self._audit = audit_logger or AuditLogger()
        self._id_factory = id_factory

    def _records(self, document: Document) -> list[Any]:
        return getattr(document, self.collection)

    def _parse(self, data: Payload, schema: type[BaseModel]) -> BaseModel:
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            raise RecordValidationError.from_pydantic(self.entity_type, e) from e

    def _new_id(self, records: list[Any]) -> str:
        existing = {get_record_id(r) for r in records}
        record_id = self._id_factory()
        while record_id in existing:
            record_id = self._id_factory()
        return record_id

    def _index_of(self, records: list[Any], record_id: str) -> Optional[int]:
        for index, record in enumerate(records):
            if get_record_id(record) == record_id:
                return index
        return None

    def _build(self, draft: Any, record_id: str, now: str) -> Any:
        raise NotImplementedError

    def _merge(self, current: dict, patch: Any, now: str) -> dict:
        raise NotImplementedError

    def _label(self, record: Any) -> str:
        raise NotImplementedError

    def create(self, data: Payload) -> Any:
        """
        Validate `data`, assign an id and timestamps, prepend and save.

        Raises:
            RecordValidationError: `data` does not fit the draft schema.
                Nothing is written in that case.
        """
        draft = self._parse(data, self.draft_schema)

        document = self._repository.load()
        records = self._records(document)
        record = self._build(draft, self._new_id(records), self._repository.now())

        records.insert(0, record.to_stored())
        self._repository.save(document)

        self._audit.log_record_created(self.entity_type, record.id, self._label(record))
        return record

    def update(self, record_id: str, data: Payload) -> None:
        """
        Apply the provided fields of `data` to the record with `record_id`.

        An unknown id leaves the stored document untouched.

        Raises:
            RecordValidationError: `data` does not fit the update schema.
        """
        patch = self._parse(data, self.update_schema)

        document = self._repository.load()
        records = self._records(document)
        index = self._index_of(records, record_id)
        if index is None:
            self._audit.log_record_not_found(self.entity_type, record_id, "update")
            return

        records[index] = self._merge(records[index], patch, self._repository.now())
        self._repository.save(document)

        self._audit.log_record_updated(
            self.entity_type, record_id, sorted(patch.model_fields_set)
        )

    def delete(self, record_id: str) -> None:
        """Remove the record with `record_id`; the document is saved either way."""
        document = self._repository.load()
        records = self._records(document)
        remaining = [r for r in records if get_record_id(r) != record_id]
        found = len(remaining) != len(records)

        setattr(document, self.collection, remaining)
        self._repository.save(document)

        if found:
            self._audit.log_record_deleted(self.entity_type, record_id)
        else:
            self._audit.log_record_not_found(self.entity_type, record_id, "delete")

    def get(self, record_id: str) -> Optional[dict]:
        """A copy of the record with `record_id`, or None."""
        records = self._records(self._repository.load())
        index = self._index_of(records, record_id)
        if index is None:
            return None
        return copy.deepcopy(records[index])

    def list(self) -> list[Any]:
        """A copy of the whole collection, in stored order."""
        return copy.deepcopy(self._records(self._repository.load()))


class GoalStore(_CollectionStore):
    entity_type = "goal"
    collection = "goals"
    draft_schema = GoalDraft
    update_schema = GoalUpdate

    def _build(self, draft: GoalDraft, record_id: str, now: str) -> Goal:
        return build_goal(draft, record_id, now)

    def _merge(self, current: dict, patch: GoalUpdate, now: str) -> dict:
        return merge_goal(current, patch, now)

    def _label(self, record: Goal) -> str:
        return record.title


class EntryStore(_CollectionStore):
    entity_type = "entry"
    collection = "entries"
    draft_schema = EntryDraft
    update_schema = EntryUpdate

    def _build(self, draft: EntryDraft, record_id: str, now: str) -> Entry:
        return build_entry(draft, record_id, now)

    def _merge(self, current: dict, patch: EntryUpdate, now: str) -> dict:
        return merge_entry(current, patch, now)

    def _label(self, record: Entry) -> str:
        return f"{record.person_name} ({record.type.value} {record.amount:g})"


class RecordStore:
    """Both collections behind one object, sharing a repository."""

    def __init__(
        self,
        repository: DocumentRepository,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        self.goals = GoalStore(repository, audit_logger, id_factory)
        self.entries = EntryStore(repository, audit_logger, id_factory)
