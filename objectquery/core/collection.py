"""
Collection class for managing queryable records.

A Collection is an ordered container of records (mappings or plain
objects). It evaluates filter expressions and sorts by field, returning
new collections, which makes it the query target for ``ObjectQuery``.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from ..query.filters import evaluate_filter, get_field_value
from ..query.parser import parse_expression
from ..storage.serialization import load_records, save_records
from ..utils.logging import get_logger


logger = get_logger(__name__)


class Collection:
    """
    An ordered, in-memory set of records.

    Example:
        >>> people = Collection([
        ...     {"id": 1, "name": "clinton", "age": 18},
        ...     {"id": 2, "name": "necati", "age": 34},
        ... ], name="Person")
        >>> len(people.filtered("age > $0", 30))
        1
        >>> [p["age"] for p in people.sorted("age", reverse=True)]
        [34, 18]
    """

    def __init__(
        self,
        records: Optional[Iterable[Any]] = None,
        name: str = "default",
    ):
        """
        Initialize a collection.

        Args:
            records: Initial records
            name: Collection name, used in logs and reprs
        """
        self.name = name
        self._records: List[Any] = list(records) if records is not None else []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._snapshot())

    def __getitem__(self, index: Union[int, slice]) -> Any:
        if isinstance(index, slice):
            return Collection(self._records[index], name=self.name)
        return self._records[index]

    def __repr__(self) -> str:
        return f"Collection(name='{self.name}', records={len(self._records)})"

    def _snapshot(self) -> List[Any]:
        with self._lock:
            return list(self._records)

    def to_list(self) -> List[Any]:
        """Records as a new list."""
        return self._snapshot()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, record: Any) -> None:
        """Append a record."""
        with self._lock:
            self._records.append(record)

    def extend(self, records: Iterable[Any]) -> int:
        """
        Append records.

        Returns:
            Number of records added
        """
        records = list(records)
        with self._lock:
            self._records.extend(records)
        return len(records)

    def clear(self) -> int:
        """
        Remove all records.

        Returns:
            Number of records removed
        """
        with self._lock:
            count = len(self._records)
            self._records = []
        return count

    # ------------------------------------------------------------------
    # Query interface
    # ------------------------------------------------------------------

    def filtered(self, expression: str, *values: Any) -> "Collection":
        """
        Records matching a filter expression.

        A blank expression matches every record.

        Args:
            expression: Filter expression, e.g. ``"age > $0 AND name BEGINSWITH[c] $1"``
            *values: Values for the ``$0``, ``$1``, ... placeholders

        Returns:
            New collection with the matching records in their current order

        Raises:
            ExpressionSyntaxError: If the expression cannot be parsed
            PlaceholderError: If a placeholder has no value
        """
        predicate = parse_expression(expression, *values) if expression.strip() else None
        records = [r for r in self._snapshot() if evaluate_filter(predicate, r)]

        logger.debug(
            f"Collection '{self.name}': '{expression}' matched "
            f"{len(records)}/{len(self._records)} records"
        )
        return Collection(records, name=self.name)

    def sorted(self, field: str, reverse: bool = False) -> "Collection":
        """
        Records ordered by a field.

        The sort is stable. Records without a value for ``field`` come
        first in ascending order and last in descending order.
        """
        def sort_key(record: Any):
            value = get_field_value(record, field)
            return (value is not None, value if value is not None else 0)

        records = sorted(self._snapshot(), key=sort_key, reverse=reverse)
        return Collection(records, name=self.name)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: Union[str, Path], compress: Optional[bool] = None) -> int:
        """
        Persist the records to a file.

        Only mapping records can be saved. ``compress`` defaults to the
        ``storage.compress`` setting.

        Returns:
            Number of bytes written
        """
        if compress is None:
            from config.settings import get_settings
            compress = get_settings().storage.compress

        records = self._snapshot()
        written = save_records(path, records, compress=compress)
        logger.info(f"Saved collection '{self.name}' ({len(records)} records) to {path}")
        return written

    @classmethod
    def load(cls, path: Union[str, Path], name: Optional[str] = None) -> "Collection":
        """Load a collection saved with ``save``."""
        records = load_records(path)
        name = name or Path(path).stem
        logger.info(f"Loaded collection '{name}' ({len(records)} records) from {path}")
        return cls(records, name=name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "records": self._snapshot(),
        }
