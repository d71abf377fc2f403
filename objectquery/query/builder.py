"""
Fluent query builder.

``ObjectQuery`` records criteria through chained method calls and
serializes them into a filter expression with positional placeholders,
which it hands to a collection's ``filtered`` method.

Example:
    >>> query = (
    ...     ObjectQuery.where(people)
    ...     .contains("name", "phu", True)
    ...     .begin_group()
    ...     .greater_than("age", 25)
    ...     .or_()
    ...     .in_("id", [1001, 1002])
    ...     .end_group()
    ... )
    >>> str(query)
    'name CONTAINS[c] $0 AND (age > $1 OR (id == $2 OR id == $3))'
    >>> query.get_values()
    ['phu', 25, 1001, 1002]
    >>> adults = query.sort("age", "DESC").find_all()

Any object with ``filtered(expression, *values)`` and
``sorted(field, reverse)`` returning sized, indexable results can act as
the collection; ``objectquery.core.collection.Collection`` is the
in-memory implementation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union
from datetime import date

from ..core.exceptions import MissingCollectionError, UnsupportedOperationError
from ..utils.logging import get_logger
from .aggregates import average_field, distinct_by, max_by, min_by, sum_field
from .criteria import (
    Comparison,
    CompiledQuery,
    CriteriaElement,
    CriteriaEntry,
    CriteriaGroup,
    CriteriaOperator,
    Keyword,
    serialize,
)


logger = get_logger(__name__)

EqualValueType = Union[str, int, float, bool, date]
CompareValueType = Union[int, float, date]


class SortOrder(str, Enum):
    """Sort directions accepted by ``ObjectQuery.sort``."""
    ASC = "ASC"
    DESC = "DESC"


class _GroupState(Enum):
    CLOSED = "closed"
    OPEN = "open"


class ObjectQuery:
    """
    Chainable builder of filter criteria over a collection.

    Criteria added outside a group are AND-joined at the top level.
    Criteria added after ``begin_group`` are collected into one
    parenthesized clause until ``end_group``; inside a group, ``and_`` and
    ``or_`` join the neighbouring criteria. ``not_`` anywhere negates the
    whole expression.

    The builder keeps no locks; share it between threads only with
    external synchronization.
    """

    def __init__(self, objects: Any = None, settings=None):
        """
        Initialize a query.

        Args:
            objects: Collection to query (may be supplied later through
                ``where``)
            settings: Settings object; defaults to the process-wide settings
        """
        if settings is None:
            from config.settings import get_settings
            settings = get_settings()

        self.objects = objects
        self.settings = settings

        self._criteria: List[CriteriaElement] = []
        self._group_state = _GroupState.CLOSED
        self._values: List[Any] = []

        self._sort_field: Optional[str] = None
        self._sort_reverse = False

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def where(cls, objects: Any) -> "ObjectQuery":
        """Create a new query over ``objects``."""
        return cls(objects)

    @classmethod
    def create(cls, objects: Any = None) -> "ObjectQuery":
        """Create a new query. Alias of ``where`` with an optional collection."""
        return cls(objects)

    # ------------------------------------------------------------------
    # Criteria accumulation
    # ------------------------------------------------------------------

    def add_criteria(self, criteria: CriteriaEntry) -> "ObjectQuery":
        """
        Append an entry at the top level, or to the open group.

        While a group is open, entries go to the last criteria element if
        it is a group, so a group that follows another one directly extends
        it. Otherwise a new group is started.
        """
        if self._group_state is _GroupState.OPEN:
            if not (self._criteria and isinstance(self._criteria[-1], CriteriaGroup)):
                self._criteria.append(CriteriaGroup())
            self._criteria[-1].append(criteria)
        else:
            self._criteria.append(criteria)
        return self

    def begin_group(self) -> "ObjectQuery":
        """Begin grouping of conditions ("left parenthesis")."""
        self._group_state = _GroupState.OPEN
        return self

    def end_group(self) -> "ObjectQuery":
        """End grouping of conditions ("right parenthesis")."""
        self._group_state = _GroupState.CLOSED
        return self

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def _compare(
        self,
        field_name: str,
        operator: CriteriaOperator,
        *values: Any,
        casing: bool = False,
    ) -> "ObjectQuery":
        return self.add_criteria(
            Comparison(field_name, operator, tuple(values), bool(casing))
        )

    def equal_to(self, field_name: str, value: EqualValueType) -> "ObjectQuery":
        """Equal-to comparison."""
        return self._compare(field_name, CriteriaOperator.EQ, value)

    def not_equal_to(self, field_name: str, value: EqualValueType) -> "ObjectQuery":
        """Not-equal-to comparison."""
        return self._compare(field_name, CriteriaOperator.NE, value)

    def greater_than(self, field_name: str, value: CompareValueType) -> "ObjectQuery":
        """Greater-than comparison."""
        return self._compare(field_name, CriteriaOperator.GT, value)

    def greater_than_or_equal_to(
        self,
        field_name: str,
        value: CompareValueType,
    ) -> "ObjectQuery":
        """Greater-than-or-equal-to comparison."""
        return self._compare(field_name, CriteriaOperator.GTE, value)

    def less_than(self, field_name: str, value: CompareValueType) -> "ObjectQuery":
        """Less-than comparison."""
        return self._compare(field_name, CriteriaOperator.LT, value)

    def less_than_or_equal_to(
        self,
        field_name: str,
        value: CompareValueType,
    ) -> "ObjectQuery":
        """Less-than-or-equal-to comparison."""
        return self._compare(field_name, CriteriaOperator.LTE, value)

    def between(
        self,
        field_name: str,
        from_: CompareValueType,
        to: CompareValueType,
    ) -> "ObjectQuery":
        """
        Between condition, inclusive on both ends.

        Args:
            field_name: Field to compare
            from_: Lower bound
            to: Upper bound
        """
        return self._compare(field_name, CriteriaOperator.BETWEEN, from_, to)

    def begins_with(self, field_name: str, value: str, casing: bool = False) -> "ObjectQuery":
        """
        Condition that the value of field begins with the specified string.

        Args:
            field_name: Field to match
            value: Prefix
            casing: True for ``BEGINSWITH[c]`` (case-insensitive)
        """
        return self._compare(field_name, CriteriaOperator.BEGINSWITH, value, casing=casing)

    def ends_with(self, field_name: str, value: str, casing: bool = False) -> "ObjectQuery":
        """Condition that the value of field ends with the specified string."""
        return self._compare(field_name, CriteriaOperator.ENDSWITH, value, casing=casing)

    def contains(self, field_name: str, value: str, casing: bool = False) -> "ObjectQuery":
        """Condition that the value of field contains the specified substring."""
        return self._compare(field_name, CriteriaOperator.CONTAINS, value, casing=casing)

    def in_(self, field_name: str, values: Iterable[EqualValueType]) -> "ObjectQuery":
        """
        In comparison: the field equals any of ``values``.

        An empty ``values`` renders an empty clause ``()``, which matches
        nothing.
        """
        return self._compare(field_name, CriteriaOperator.IN, *values)

    # ------------------------------------------------------------------
    # Logic
    # ------------------------------------------------------------------

    def not_(self) -> "ObjectQuery":
        """Negate the whole query, wherever it is called."""
        return self.add_criteria(Keyword.NOT)

    def and_(self) -> "ObjectQuery":
        """AND logic operator. Use in group."""
        return self.add_criteria(Keyword.AND)

    def or_(self) -> "ObjectQuery":
        """OR logic operator. Use in group."""
        return self.add_criteria(Keyword.OR)

    def join(self, query: "ObjectQuery") -> "ObjectQuery":
        """
        Combine with another query.

        The other query's top-level criteria are appended to this one's and
        AND-joined with them; its sort settings are ignored.
        """
        for element in list(query._criteria):
            if isinstance(element, CriteriaGroup):
                element = element.copy()
            self._criteria.append(element)
        return self

    # ------------------------------------------------------------------
    # Not supported
    # ------------------------------------------------------------------

    def is_empty(self, field_name: str) -> "ObjectQuery":
        raise UnsupportedOperationError("is_empty")

    def is_not_empty(self, field_name: str) -> "ObjectQuery":
        raise UnsupportedOperationError("is_not_empty")

    def is_not_null(self, field_name: str) -> "ObjectQuery":
        raise UnsupportedOperationError("is_not_null")

    def is_null(self, field_name: str) -> "ObjectQuery":
        raise UnsupportedOperationError("is_null")

    def like(self, field_name: str, value: str) -> "ObjectQuery":
        raise UnsupportedOperationError("like")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def compile(self) -> CompiledQuery:
        """
        Serialize the criteria.

        Returns:
            CompiledQuery with the expression and its bound values
        """
        compiled = serialize(self._criteria)
        self._values = list(compiled.values)
        return compiled

    def to_string(self) -> str:
        """Serialize the criteria and return the filter expression."""
        return self.compile().expression

    def get_values(self) -> List[Any]:
        """Values bound by the most recent serialization."""
        return list(self._values)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"ObjectQuery(criteria={len(self._criteria)}, "
            f"sort={self._sort_field!r}, reverse={self._sort_reverse})"
        )

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def sort(
        self,
        field_name: str,
        order: Union[SortOrder, str] = SortOrder.ASC,
    ) -> "ObjectQuery":
        """
        Set the sort applied by ``find_all``.

        Args:
            field_name: Field to sort by
            order: ``"ASC"`` or ``"DESC"``; anything but DESC sorts ascending
        """
        self._sort_field = field_name
        self._sort_reverse = str(getattr(order, "value", order)).upper() == SortOrder.DESC.value
        return self

    @property
    def sort_by(self) -> Optional[Tuple[str, bool]]:
        """``(field, reverse)`` of the current sort, if any."""
        if self._sort_field is None:
            return None
        return self._sort_field, self._sort_reverse

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _get_filtered_objects(self) -> Any:
        if self.objects is None:
            raise MissingCollectionError("No collection to query; use ObjectQuery.where(objects)")

        compiled = self.compile()
        if not compiled:
            return self.objects

        logger.debug(f"Filtering with '{compiled.expression}' values={list(compiled.values)!r}")
        return self.objects.filtered(compiled.expression, *compiled.values)

    def find_all(self) -> Any:
        """Find all objects that fulfill the query conditions, sorted if requested."""
        results = self._get_filtered_objects()
        if self._sort_field:
            results = results.sorted(self._sort_field, self._sort_reverse)
        return results

    def find_first(self) -> Optional[Any]:
        """First object that fulfills the query conditions, or None."""
        results = self._get_filtered_objects()
        return results[0] if len(results) else None

    def count(self) -> int:
        """Number of objects that fulfill the query conditions."""
        return len(self._get_filtered_objects())

    def distinct(self, field_name: str) -> List[Any]:
        """Matching objects with distinct values of ``field_name``, first seen kept."""
        return distinct_by(self._get_filtered_objects(), field_name)

    def average(self, field_name: str) -> float:
        """
        Average of a field over the matching objects.

        Returns NaN for an empty result, or raises EmptyResultError when the
        settings have ``empty_average: raise``.
        """
        return average_field(
            self._get_filtered_objects(),
            field_name,
            empty=self.settings.empty_average,
        )

    def sum(self, field_name: str) -> Any:
        """Sum of a field over the matching objects; 0 when none match."""
        return sum_field(self._get_filtered_objects(), field_name)

    def max(self, field_name: str) -> Optional[Any]:
        """Object with the largest value of ``field_name``, or None."""
        return max_by(self._get_filtered_objects(), field_name)

    def min(self, field_name: str) -> Optional[Any]:
        """Object with the smallest value of ``field_name``, or None."""
        return min_by(self._get_filtered_objects(), field_name)
