"""Tests for the query engine."""

import copy

import pytest

from goals_accounts.models.query import EntryQuery, GoalQuery
from goals_accounts.queries import (
    QueryExecutionError,
    QueryExecutor,
    casefold_collation,
    locale_collation,
    query_entries,
    query_goals,
)


def make_entry(index, **overrides):
    entry = {
        "id": f"e{index}",
        "personName": f"Person {index}",
        "amount": float(index),
        "phone": "",
        "type": "incoming",
        "notes": "",
        "date": f"2024-01-{index:02d}T00:00:00.000Z",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }
    entry.update(overrides)
    return entry


def make_goal(index, **overrides):
    goal = {
        "id": f"g{index}",
        "title": f"Goal {index}",
        "description": "",
        "type": "short-term",
        "status": "pending",
        "createdAt": f"2024-01-{index:02d}T00:00:00.000Z",
        "updatedAt": f"2024-01-{index:02d}T00:00:00.000Z",
    }
    goal.update(overrides)
    return goal


class TestPagination:
    """Tests for page / limit handling."""

    def test_page_boundaries(self):
        """Test 25 records at limit 20: pages of 20, 5, then 0."""
        entries = [make_entry(i) for i in range(1, 26)]

        first = query_entries(entries, {"page": 1, "limit": 20})
        second = query_entries(entries, {"page": 2, "limit": 20})
        third = query_entries(entries, {"page": 3, "limit": 20})

        assert len(first.items) == 20
        assert len(second.items) == 5
        assert third.items == []
        assert first.pagination.pages == 2
        assert first.pagination.total == 25
        assert third.pagination.page == 3

    def test_empty_collection(self):
        """Test that no records means zero pages."""
        page = query_goals([])
        assert page.items == []
        assert page.pagination.total == 0
        assert page.pagination.pages == 0

    def test_non_positive_values_fall_back(self):
        """Test that page <= 0 means 1 and limit <= 0 means the default."""
        entries = [make_entry(i) for i in range(1, 26)]
        page = query_entries(entries, {"page": 0, "limit": -3})
        assert page.pagination.page == 1
        assert page.pagination.limit == 20
        assert len(page.items) == 20

    def test_custom_default_limit(self):
        """Test the configurable default page size."""
        goals = [make_goal(i) for i in range(1, 8)]
        page = query_goals(goals, None, default_limit=5)
        assert page.pagination.limit == 5
        assert page.pagination.pages == 2


class TestSorting:
    """Tests for signed sort keys."""

    def test_amount_descending(self):
        """Test '-amount' gives the largest first."""
        entries = [make_entry(1, amount=100), make_entry(2, amount=5), make_entry(3, amount=50)]
        page = query_entries(entries, {"sort": "-amount"})
        assert [e["amount"] for e in page.items] == [100, 50, 5]

    def test_amount_ascending(self):
        """Test 'amount' gives the smallest first."""
        entries = [make_entry(1, amount=100), make_entry(2, amount=5), make_entry(3, amount=50)]
        page = query_entries(entries, {"sort": "amount"})
        assert [e["amount"] for e in page.items] == [5, 50, 100]

    def test_default_goal_order_is_newest_first(self):
        """Test that goals without a sort come newest createdAt first."""
        goals = [make_goal(1), make_goal(3), make_goal(2)]
        page = query_goals(goals)
        assert [g["id"] for g in page.items] == ["g3", "g2", "g1"]

    def test_default_entry_order_is_latest_date_first(self):
        """Test that entries without a sort come latest date first."""
        entries = [make_entry(2), make_entry(9), make_entry(4)]
        page = query_entries(entries)
        assert [e["id"] for e in page.items] == ["e9", "e4", "e2"]

    def test_unknown_key_keeps_order(self):
        """Test that an unknown sort key does not reorder."""
        goals = [make_goal(2), make_goal(1), make_goal(3)]
        page = query_goals(goals, {"sort": "-colour"})
        assert [g["id"] for g in page.items] == ["g2", "g1", "g3"]

    def test_sort_is_stable(self):
        """Test that equal keys keep their input order in both directions."""
        entries = [
            make_entry(1, amount=10),
            make_entry(2, amount=10),
            make_entry(3, amount=20),
            make_entry(4, amount=10),
        ]
        ascending = query_entries(entries, {"sort": "amount"})
        descending = query_entries(entries, {"sort": "-amount"})
        assert [e["id"] for e in ascending.items] == ["e1", "e2", "e4", "e3"]
        assert [e["id"] for e in descending.items] == ["e3", "e1", "e2", "e4"]

    def test_title_uses_collation(self):
        """Test that title sorting ignores case."""
        goals = [make_goal(1, title="banana"), make_goal(2, title="Apple"), make_goal(3, title="cherry")]
        page = query_goals(goals, {"sort": "title"})
        assert [g["title"] for g in page.items] == ["Apple", "banana", "cherry"]

    def test_custom_collation(self):
        """Test that a caller-supplied collation decides name order."""
        entries = [make_entry(1, personName="bb"), make_entry(2, personName="a"), make_entry(3, personName="ccc")]
        page = query_entries(entries, {"sort": "personName"}, collation=len)
        assert [e["personName"] for e in page.items] == ["a", "bb", "ccc"]

    def test_snake_case_sort_keys(self):
        """Test that snake_case sort keys are accepted."""
        entries = [make_entry(1, personName="Zed"), make_entry(2, personName="Amy")]
        page = query_entries(entries, {"sort": "person_name"})
        assert [e["personName"] for e in page.items] == ["Amy", "Zed"]

    def test_deadline_missing_sorts_first(self):
        """Test that goals without a deadline sort as an empty string."""
        goals = [
            make_goal(1, deadline="2024-06-30T00:00:00.000Z"),
            make_goal(2),
            make_goal(3, deadline="2024-03-01T00:00:00.000Z"),
        ]
        page = query_goals(goals, {"sort": "deadline"})
        assert [g["id"] for g in page.items] == ["g2", "g3", "g1"]


class TestFilters:
    """Tests for filters, search and date ranges."""

    def test_filter_goals_by_status_and_type(self):
        """Test exact-match goal filters."""
        goals = [
            make_goal(1, status="completed"),
            make_goal(2, status="pending", type="long-term"),
            make_goal(3, status="pending"),
        ]
        page = query_goals(goals, GoalQuery(status="pending", type="long-term"))
        assert [g["id"] for g in page.items] == ["g2"]

    def test_filter_entries_by_type(self):
        """Test the entry type filter."""
        entries = [make_entry(1), make_entry(2, type="outgoing")]
        page = query_entries(entries, {"type": "outgoing"})
        assert [e["id"] for e in page.items] == ["e2"]

    def test_search_is_case_insensitive(self):
        """Test search against personName and notes."""
        entries = [
            make_entry(1, personName="Sara Ahmed"),
            make_entry(2, notes="Paid SARA back"),
            make_entry(3, personName="Omar"),
        ]
        page = query_entries(entries, {"search": "sara", "sort": "date"})
        assert [e["id"] for e in page.items] == ["e1", "e2"]

    def test_blank_search_ignored(self):
        """Test that a whitespace search matches everything."""
        entries = [make_entry(1), make_entry(2)]
        assert query_entries(entries, {"search": "   "}).pagination.total == 2

    def test_date_range_inclusive(self):
        """Test that both bounds are inclusive."""
        entries = [make_entry(i) for i in range(1, 11)]
        page = query_entries(entries, EntryQuery.model_validate({
            "from": "2024-01-03T00:00:00.000Z",
            "to": "2024-01-05T00:00:00.000Z",
            "sort": "date",
        }))
        assert [e["id"] for e in page.items] == ["e3", "e4", "e5"]

    def test_date_only_upper_bound_is_lexicographic(self):
        """Test that 'YYYY-MM-DD' as an upper bound excludes that day's timestamps."""
        entries = [make_entry(4), make_entry(5)]
        page = query_entries(entries, {"to": "2024-01-05"})
        assert [e["id"] for e in page.items] == ["e4"]

    def test_filter_order(self):
        """Test that filters apply before pagination."""
        entries = [make_entry(i, type="outgoing" if i % 2 else "incoming") for i in range(1, 26)]
        page = query_entries(entries, {"type": "incoming", "limit": 5, "page": 3, "sort": "date"})
        assert page.pagination.total == 12
        assert page.pagination.pages == 3
        assert [e["id"] for e in page.items] == ["e22", "e24"]


class TestQueryPurity:
    """Tests for determinism and isolation."""

    def test_query_is_idempotent(self):
        """Test that the same query twice gives the same page."""
        entries = [make_entry(i) for i in range(1, 15)]
        params = {"search": "person 1", "sort": "-amount", "limit": 3}
        assert query_entries(entries, params) == query_entries(entries, params)

    def test_input_not_mutated(self):
        """Test that the snapshot is left untouched."""
        entries = [make_entry(3), make_entry(1), make_entry(2)]
        snapshot = copy.deepcopy(entries)
        page = query_entries(entries, {"sort": "amount"})
        page.items[0]["amount"] = 999
        assert entries == snapshot

    def test_tolerates_odd_records(self):
        """Test that records with missing or mistyped fields do not break queries."""
        entries = [make_entry(1), {"id": "bare"}, "not a record", make_entry(2, amount="lots")]
        page = query_entries(entries, {"sort": "-amount", "search": ""})
        assert page.pagination.total == 4

    def test_rejects_unknown_params_type(self):
        """Test that params must be a query model or a mapping."""
        with pytest.raises(QueryExecutionError):
            query_goals([], ["sort", "title"])

    def test_rejects_malformed_params(self):
        """Test that unparseable values surface as QueryExecutionError."""
        with pytest.raises(QueryExecutionError):
            query_entries([], {"page": "abc"})


class TestCollation:
    """Tests for collations."""

    def test_casefold_collation(self):
        """Test that casefold keys order case-insensitively."""
        names = ["b", "A", "a", "B"]
        assert sorted(names, key=casefold_collation) == ["A", "a", "B", "b"]

    def test_missing_locale_falls_back(self):
        """Test that an uninstalled locale falls back to casefold."""
        assert locale_collation("xx_NOWHERE.UTF-8") is casefold_collation


class TestQueryExecutor:
    """Tests for QueryExecutor against a live store."""

    def test_executor_reads_store(self, records):
        """Test that the executor queries the current store contents."""
        records.entries.create({"personName": "Ali", "amount": 100})
        records.entries.create({"personName": "Mona", "amount": 5})
        records.entries.create({"personName": "Omar", "amount": 50})

        executor = QueryExecutor(records)
        page = executor.entries({"sort": "-amount"})
        assert [e["amount"] for e in page.items] == [100, 50, 5]

    def test_executor_goals_default(self, records):
        """Test that a just-created goal lists first."""
        records.goals.create({"title": "Older"})
        records.goals.create({"title": "Save"})

        page = QueryExecutor(records).goals()
        assert page.items[0]["title"] == "Save"
        assert page.items[0]["status"] == "pending"
