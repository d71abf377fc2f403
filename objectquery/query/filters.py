"""
Record filtering for objectquery collections.

Filters are the evaluated form of a parsed filter expression:

- Comparison operators (==, <>, >, >=, <, <=)
- String operators (BEGINSWITH, ENDSWITH, CONTAINS), optionally
  case-insensitive
- Logical operators (AND, OR, NOT)
- Constant predicates (TRUEPREDICATE, FALSEPREDICATE)
- Nested field access (field.subfield)

Example:
    >>> filter = AndFilter([
    ...     FieldFilter("age", FilterOperator.GT, 30),
    ...     FieldFilter("name", FilterOperator.BEGINSWITH, "N", case_insensitive=True),
    ... ])
    >>> filter.evaluate({"age": 34, "name": "necati"})
    True
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, List


class FilterOperator(str, Enum):
    """Filter comparison operators, keyed by their expression token."""

    # Equality
    EQ = "=="
    NE = "<>"

    # Ordering
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    # String operations
    BEGINSWITH = "BEGINSWITH"
    ENDSWITH = "ENDSWITH"
    CONTAINS = "CONTAINS"


_MISSING = object()


def get_field_value(record: Any, field: str) -> Any:
    """
    Get a field value from a record, supporting nested access.

    Mappings are read by key, other objects by attribute. Dotted paths
    descend into nested records and integer path parts index sequences.

    Returns:
        The value, or None if any part of the path is missing
    """
    current = record

    for part in field.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, (list, tuple)):
            try:
                current = current[int(part)]
            except (ValueError, IndexError):
                return None
        else:
            current = getattr(current, part, _MISSING)

        if current is _MISSING:
            return None

    return current


class Filter(ABC):
    """Abstract base class for all filters."""

    @abstractmethod
    def evaluate(self, record: Any) -> bool:
        """
        Evaluate the filter against a record.

        Args:
            record: The record to check

        Returns:
            True if the record matches the filter
        """
        pass


class FieldFilter(Filter):
    """
    Filter on a single field.

    Supports nested field access using dot notation:
        FieldFilter("owner.age", FilterOperator.GTE, 18)
    """

    def __init__(
        self,
        field: str,
        operator: FilterOperator,
        value: Any,
        case_insensitive: bool = False,
    ):
        self.field = field
        self.operator = operator
        self.value = value
        self.case_insensitive = case_insensitive

    def evaluate(self, record: Any) -> bool:
        """Evaluate the filter."""
        field_value = get_field_value(record, self.field)

        try:
            return self._compare(field_value, self.operator, self.value)
        except (TypeError, ValueError):
            return False

    def _compare(
        self,
        field_value: Any,
        op: FilterOperator,
        compare_value: Any,
    ) -> bool:
        """Compare field value using operator."""

        if self.case_insensitive and isinstance(field_value, str) and isinstance(compare_value, str):
            field_value = field_value.casefold()
            compare_value = compare_value.casefold()

        # Equality
        if op == FilterOperator.EQ:
            return field_value == compare_value

        if op == FilterOperator.NE:
            return field_value != compare_value

        # Ordering
        if field_value is None or compare_value is None:
            if op in (FilterOperator.GT, FilterOperator.GTE, FilterOperator.LT, FilterOperator.LTE):
                return False

        if op == FilterOperator.GT:
            return field_value > compare_value

        if op == FilterOperator.GTE:
            return field_value >= compare_value

        if op == FilterOperator.LT:
            return field_value < compare_value

        if op == FilterOperator.LTE:
            return field_value <= compare_value

        # String operations
        if not (isinstance(field_value, str) and isinstance(compare_value, str)):
            return False

        if op == FilterOperator.BEGINSWITH:
            return field_value.startswith(compare_value)

        if op == FilterOperator.ENDSWITH:
            return field_value.endswith(compare_value)

        if op == FilterOperator.CONTAINS:
            return compare_value in field_value

        return False

    def __repr__(self) -> str:
        marker = "[c]" if self.case_insensitive else ""
        return f"FieldFilter({self.field} {self.operator.value}{marker} {self.value!r})"


class AndFilter(Filter):
    """Logical AND of multiple filters."""

    def __init__(self, filters: List[Filter]):
        self.filters = filters

    def evaluate(self, record: Any) -> bool:
        return all(f.evaluate(record) for f in self.filters)

    def __repr__(self) -> str:
        return f"AndFilter({self.filters})"


class OrFilter(Filter):
    """Logical OR of multiple filters."""

    def __init__(self, filters: List[Filter]):
        self.filters = filters

    def evaluate(self, record: Any) -> bool:
        return any(f.evaluate(record) for f in self.filters)

    def __repr__(self) -> str:
        return f"OrFilter({self.filters})"


class NotFilter(Filter):
    """Logical NOT of a filter."""

    def __init__(self, filter: Filter):
        self.filter = filter

    def evaluate(self, record: Any) -> bool:
        return not self.filter.evaluate(record)

    def __repr__(self) -> str:
        return f"NotFilter({self.filter})"


class ConstantFilter(Filter):
    """Matches every record or none."""

    def __init__(self, result: bool):
        self.result = result

    def evaluate(self, record: Any) -> bool:
        return self.result

    def __repr__(self) -> str:
        return "TRUEPREDICATE" if self.result else "FALSEPREDICATE"


def evaluate_filter(filter: Filter | None, record: Any) -> bool:
    """
    Evaluate a filter against a record.

    Args:
        filter: The filter to evaluate (None = always True)
        record: The record

    Returns:
        True if the record matches the filter
    """
    if filter is None:
        return True
    return filter.evaluate(record)
