"""
Aggregations over query results.

All functions accept any iterable of records (a ``Collection``, a list of
dicts, a list of objects) and read fields with ``get_field_value``, so
dotted paths work here as they do in filter expressions.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import numpy as np

from ..core.exceptions import EmptyResultError
from .filters import get_field_value


def field_values(records: Iterable[Any], field: str) -> List[Any]:
    """Values of ``field`` for every record, in order, nulls included."""
    return [get_field_value(record, field) for record in records]


def sum_field(records: Iterable[Any], field: str) -> Any:
    """
    Sum of the non-null values of a field.

    Returns:
        The sum as a Python number, 0 when there is nothing to add
    """
    values = [v for v in field_values(records, field) if v is not None]
    if not values:
        return 0
    array = np.asarray(values)
    if array.dtype.kind in "iub":
        # int64/uint64 wrap on overflow
        array = np.asarray(values, dtype=object)
    total = np.sum(array)
    return total.item() if isinstance(total, np.generic) else total


def average_field(
    records: Iterable[Any],
    field: str,
    empty: str = "nan",
) -> float:
    """
    Mean of a field: the sum of its non-null values over the record count.

    Args:
        records: Records to aggregate
        field: Field name
        empty: ``"nan"`` returns NaN for an empty input, ``"raise"``
            raises EmptyResultError

    Returns:
        The mean as a float
    """
    records = list(records)
    if not records:
        if empty == "raise":
            raise EmptyResultError(f"Cannot average '{field}' over an empty result")
        return float("nan")
    return float(sum_field(records, field)) / len(records)


def _extreme_by(records: Iterable[Any], field: str, pick) -> Optional[Any]:
    candidates = [
        (record, value)
        for record, value in ((r, get_field_value(r, field)) for r in records)
        if value is not None
    ]
    if not candidates:
        return None
    # builtin max/min keep the first of equal candidates
    return pick(candidates, key=lambda pair: pair[1])[0]


def max_by(records: Iterable[Any], field: str) -> Optional[Any]:
    """Record with the largest non-null ``field``, first one on ties."""
    return _extreme_by(records, field, max)


def min_by(records: Iterable[Any], field: str) -> Optional[Any]:
    """Record with the smallest non-null ``field``, first one on ties."""
    return _extreme_by(records, field, min)


def distinct_by(records: Iterable[Any], field: str) -> List[Any]:
    """Records with a ``field`` value not seen before, in first-seen order."""
    seen: List[Any] = []
    result = []
    for record in records:
        value = get_field_value(record, field)
        if value in seen:
            continue
        seen.append(value)
        result.append(record)
    return result
