"""
Query Execution Engine

DESIGN DECISION: Query execution is DETERMINISTIC and PURE.
`query_goals` / `query_entries` take a collection snapshot plus
parameters and return a page. They never touch storage and never
mutate their input, so running the same query twice on the same
snapshot yields the same page.

Processing order is fixed:
    1. exact-match filters (type, status)
    2. substring search (entries)
    3. date range (entries)
    4. sort
    5. paginate

Records restored leniently may lack fields or hold odd types. Every
accessor here tolerates that instead of raising.
"""

import copy
import math
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from goals_accounts.models.query import EntryQuery, GoalQuery, Pagination, QueryPage
from goals_accounts.queries.collation import Collation, casefold_collation


DEFAULT_LIMIT = 20
DEFAULT_GOAL_SORT = "-createdAt"
DEFAULT_ENTRY_SORT = "-date"

# snake_case spellings accepted for sort keys
_SORT_ALIASES = {
    "created_at": "createdAt",
    "person_name": "personName",
}


class QueryExecutionError(Exception):
    """Query parameters could not be understood."""
    pass


# =============================================================================
# FIELD ACCESS
# =============================================================================

def _field(record: Any, key: str) -> Any:
    if isinstance(record, dict):
        return record.get(key)
    return None


def _text(record: Any, key: str) -> str:
    value = _field(record, key)
    return value if isinstance(value, str) else ""


def _number(record: Any, key: str) -> float:
    value = _field(record, key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


# =============================================================================
# PIPELINE STAGES
# =============================================================================

def _filter_exact(records: list[Any], **criteria: Optional[str]) -> list[Any]:
    """Keep records whose fields equal every non-empty criterion."""
    active = {k: v for k, v in criteria.items() if v}
    if not active:
        return list(records)
    return [
        r for r in records
        if all(_field(r, key) == value for key, value in active.items())
    ]


def _filter_search(records: list[Any], search: Optional[str]) -> list[Any]:
    """Case-insensitive substring match on personName or notes."""
    needle = (search or "").strip().casefold()
    if not needle:
        return records
    return [
        r for r in records
        if needle in _text(r, "personName").casefold()
        or needle in _text(r, "notes").casefold()
    ]


def _filter_date_range(
    records: list[Any],
    date_from: Optional[str],
    date_to: Optional[str],
) -> list[Any]:
    """
    Inclusive bounds on `date`, compared as strings.

    Stored dates are fixed-width ISO timestamps, so string order is
    time order. A bare 'YYYY-MM-DD' upper bound sorts before any
    timestamp on that same day.
    """
    if date_from:
        records = [r for r in records if _text(r, "date") >= date_from]
    if date_to:
        records = [r for r in records if _text(r, "date") <= date_to]
    return records


def _sort(
    records: list[Any],
    sort: Optional[str],
    keys: Mapping[str, Callable[[Any], Any]],
) -> list[Any]:
    """
    Stable sort on a signed key ('-' prefix for descending).

    Unknown keys leave the order as it is.
    """
    if not sort:
        return records

    descending = sort.startswith("-")
    name = sort.lstrip("-+").strip()
    name = _SORT_ALIASES.get(name, name)

    key_fn = keys.get(name)
    if key_fn is None:
        return records
    return sorted(records, key=key_fn, reverse=descending)


def _paginate(
    records: list[Any],
    page: Optional[int],
    limit: Optional[int],
    default_limit: int,
) -> QueryPage:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit

    total = len(records)
    pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit

    return QueryPage(
        items=copy.deepcopy(records[start:start + limit]),
        pagination=Pagination(page=page, limit=limit, total=total, pages=pages),
    )


def _coerce(params: Any, schema: type) -> Any:
    if params is None:
        return schema()
    if isinstance(params, schema):
        return params
    if isinstance(params, Mapping):
        try:
            return schema.model_validate(dict(params))
        except PydanticValidationError as e:
            raise QueryExecutionError(f"Invalid query parameters: {e}") from e
    raise QueryExecutionError(
        f"Expected {schema.__name__} or a mapping, got {type(params).__name__}"
    )


# =============================================================================
# PUBLIC QUERIES
# =============================================================================

def query_goals(
    collection: list[Any],
    params: Union[GoalQuery, Mapping[str, Any], None] = None,
    collation: Collation = casefold_collation,
    default_limit: int = DEFAULT_LIMIT,
) -> QueryPage:
    """
    Filter, sort and paginate a goals snapshot.

    Sort keys: createdAt, deadline, title. Without a sort the newest
    goals come first.
    """
    query = _coerce(params, GoalQuery)

    records = _filter_exact(collection, type=query.type, status=query.status)

    keys = {
        "createdAt": lambda r: _text(r, "createdAt"),
        "deadline": lambda r: _text(r, "deadline"),
        "title": lambda r: collation(_text(r, "title")),
    }
    records = _sort(records, query.sort or DEFAULT_GOAL_SORT, keys)

    return _paginate(records, query.page, query.limit, default_limit)


def query_entries(
    collection: list[Any],
    params: Union[EntryQuery, Mapping[str, Any], None] = None,
    collation: Collation = casefold_collation,
    default_limit: int = DEFAULT_LIMIT,
) -> QueryPage:
    """
    Filter, search, date-bound, sort and paginate an entries snapshot.

    Sort keys: date, amount, personName. Without a sort the most
    recent entries come first.
    """
    query = _coerce(params, EntryQuery)

    records = _filter_exact(collection, type=query.type)
    records = _filter_search(records, query.search)
    records = _filter_date_range(records, query.from_, query.to)

    keys = {
        "date": lambda r: _text(r, "date"),
        "amount": lambda r: _number(r, "amount"),
        "personName": lambda r: collation(_text(r, "personName")),
    }
    records = _sort(records, query.sort or DEFAULT_ENTRY_SORT, keys)

    return _paginate(records, query.page, query.limit, default_limit)


class QueryExecutor:
    """
    Runs queries against the current contents of a record store.

    Each call takes a fresh snapshot; nothing is cached.
    """

    def __init__(
        self,
        store: Any,
        collation: Collation = casefold_collation,
        default_limit: int = DEFAULT_LIMIT,
    ):
        """
        Args:
            store: A RecordStore (anything with .goals.list() / .entries.list()).
            collation: Sort key for title / personName.
            default_limit: Page size when a query gives none.
        """
        self._store = store
        self._collation = collation
        self._default_limit = default_limit

    def goals(
        self,
        params: Union[GoalQuery, Mapping[str, Any], None] = None,
    ) -> QueryPage:
        return query_goals(
            self._store.goals.list(), params, self._collation, self._default_limit
        )

    def entries(
        self,
        params: Union[EntryQuery, Mapping[str, Any], None] = None,
    ) -> QueryPage:
        return query_entries(
            self._store.entries.list(), params, self._collation, self._default_limit
        )
