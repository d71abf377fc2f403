"""
Integration tests for querying collections with ObjectQuery.

Tests the builder end to end: criteria are serialized, evaluated by the
collection, then sorted or aggregated.
"""

import math
import pytest
from datetime import datetime

from config.settings import Settings
from objectquery import Collection, EmptyResultError, ObjectQuery


class TestFind:
    """find_all and find_first."""

    def test_find_all(self, people_query):
        """Test an empty query returns every record."""
        results = people_query.find_all()

        assert len(results) == 5

    def test_find_all_with_filter(self, people_query):
        """Test filtered find_all."""
        results = people_query.greater_than("age", 30).find_all()

        assert len(results) == 2
        assert sorted(p["age"] for p in results) == [34, 42]

    def test_find_all_less_than_date(self, people_query):
        """Test filtering on a datetime field."""
        results = people_query.less_than("createdAt", datetime(2010, 1, 1)).find_all()

        assert len(results) == 3

    def test_find_first(self, people_query, people):
        """Test find_first without criteria."""
        assert people_query.find_first() == people[0]

    def test_find_first_with_filter(self, people_query, people):
        """Test find_first after filtering."""
        expected = people.filtered("age > 30")[0]

        assert people_query.greater_than("age", 30).find_first() == expected

    def test_find_first_ignores_sort(self, people_query):
        """Test find_first returns the first match in collection order."""
        result = people_query.greater_than("age", 30).sort("age", "DESC").find_first()

        assert result["age"] == 34

    def test_find_first_none(self, people_query):
        """Test find_first on an empty result."""
        assert people_query.greater_than("age", 100).find_first() is None

    def test_in_empty_matches_nothing(self, people_query):
        """Test an empty in_ filters out every record."""
        assert people_query.in_("id", []).count() == 0

    def test_compound(self, people_query):
        """Test groups, OR and in_ together."""
        results = (
            people_query
            .begins_with("name", "N", True)
            .begin_group()
            .greater_than("age", 30)
            .or_()
            .in_("id", [3])
            .end_group()
            .find_all()
        )

        assert [p["name"] for p in results] == ["necati", "norman"]

    def test_not(self, people_query):
        """Test negation of the whole query."""
        results = people_query.not_().equal_to("age", 18).find_all()

        assert [p["id"] for p in results] == [2, 3, 4]

    def test_between(self, people_query):
        assert people_query.between("age", 20, 35).count() == 2

    def test_join(self, people):
        """Test joined queries AND together."""
        young = ObjectQuery.where(people).less_than("age", 30)
        named = ObjectQuery.create().ends_with("name", "N", True)

        results = young.join(named).find_all()

        assert [p["name"] for p in results] == ["clinton", "norman", "martin"]

    def test_case_sensitive_contains(self, people_query):
        assert people_query.contains("name", "MAN").count() == 0

    def test_case_insensitive_contains(self, people_query):
        assert people_query.contains("name", "MAN", True).count() == 1

    def test_repeated_terminal_calls(self, people_query):
        """Test the same query can be run repeatedly."""
        people_query.greater_than("age", 20)

        assert people_query.count() == people_query.count() == 3
        assert people_query.get_values() == [20]


class TestCountAndDistinct:

    def test_count(self, people_query):
        assert people_query.count() == 5

    def test_count_with_filter(self, people_query):
        assert people_query.greater_than("age", 30).count() == 2

    def test_distinct(self, people_query):
        results = people_query.distinct("age")

        assert len(results) == 4
        assert [p["id"] for p in results] == [1, 2, 3, 4]


class TestAggregates:

    def test_average(self, people_query, person_records):
        expected = sum(p["age"] for p in person_records) / len(person_records)

        assert people_query.average("age") == expected == 28.0

    def test_sum(self, people_query):
        assert people_query.sum("age") == 140

    def test_max(self, people_query):
        assert people_query.max("age")["age"] == 42

    def test_min(self, people_query):
        result = people_query.min("age")

        assert result["age"] == 18
        assert result["id"] == 1

    def test_filtered_aggregates(self, people_query):
        people_query.greater_than("age", 20)

        assert people_query.sum("age") == 104
        assert people_query.min("age")["name"] == "norman"

    def test_empty_result(self, people_query):
        """Test aggregates over no records."""
        people_query.greater_than("age", 100)

        assert people_query.sum("age") == 0
        assert people_query.max("age") is None
        assert people_query.min("age") is None
        assert people_query.distinct("age") == []
        assert math.isnan(people_query.average("age"))

    def test_empty_average_raises_when_configured(self, people):
        query = ObjectQuery(people, settings=Settings(empty_average="raise"))

        with pytest.raises(EmptyResultError):
            query.greater_than("age", 100).average("age")


class TestSort:

    def test_sort_asc(self, people_query):
        results = people_query.sort("age").find_all()

        assert [p["age"] for p in results] == [18, 18, 28, 34, 42]

    def test_sort_desc(self, people_query):
        results = people_query.sort("age", "DESC").find_all()

        assert [p["age"] for p in results] == [42, 34, 28, 18, 18]

    def test_sort_with_filter(self, people_query):
        results = people_query.less_than("age", 30).sort("name").find_all()

        assert [p["name"] for p in results] == ["clinton", "martin", "norman"]

    def test_sort_by_date(self, people_query):
        results = people_query.sort("createdAt").find_all()

        assert [p["id"] for p in results] == [5, 1, 4, 2, 3]


class _Results(list):
    """Minimal collection: a list with filtered and sorted."""

    def __init__(self, items=(), calls=None):
        super().__init__(items)
        self.calls = calls if calls is not None else []

    def filtered(self, expression, *values):
        self.calls.append((expression, values))
        return _Results(self[:1], calls=self.calls)

    def sorted(self, field, reverse=False):
        return _Results(sorted(self, key=lambda r: r[field], reverse=reverse), calls=self.calls)


class TestCollectionBoundary:
    """The builder only relies on filtered, sorted, len and indexing."""

    def test_passes_expression_and_values(self, settings):
        objects = _Results([{"age": 1}, {"age": 2}])

        count = ObjectQuery(objects, settings=settings).between("age", 1, 2).count()

        assert count == 1
        assert objects.calls == [("age >= $0 AND age <= $1", (1, 2))]

    def test_no_filter_without_criteria(self, settings):
        objects = _Results([{"age": 2}, {"age": 1}])

        results = ObjectQuery(objects, settings=settings).sort("age").find_all()

        assert objects.calls == []
        assert [r["age"] for r in results] == [1, 2]

    def test_unsupported_does_not_touch_collection(self, settings):
        objects = _Results([{"age": 1}])
        query = ObjectQuery(objects, settings=settings)

        with pytest.raises(NotImplementedError):
            query.is_null("age")

        assert objects.calls == []
