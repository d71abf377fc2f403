"""
Criteria model and expression serialization.

A query is an ordered list whose elements are either single criteria
entries or parenthesized groups of entries:

- ``Comparison``: a field, an operator and the raw values to bind
- ``Keyword``: a literal ``AND`` / ``OR`` token, or the ``NOT`` marker
- ``CriteriaGroup``: entries captured between ``begin_group`` and
  ``end_group``

Values are bound only when the list is serialized, so placeholders
(``$0``, ``$1``, ...) are numbered across the whole expression in
encounter order and repeated serialization yields the same result.

Example:
    >>> criteria = [
    ...     Comparison("name", CriteriaOperator.CONTAINS, ("phu",), True),
    ...     CriteriaGroup([
    ...         Comparison("age", CriteriaOperator.GT, (25,)),
    ...         Keyword.OR,
    ...         Comparison("id", CriteriaOperator.IN, (1001, 1002)),
    ...     ]),
    ... ]
    >>> compiled = serialize(criteria)
    >>> compiled.expression
    'name CONTAINS[c] $0 AND (age > $1 OR (id == $2 OR id == $3))'
    >>> compiled.values
    ('phu', 25, 1001, 1002)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Sequence, Tuple, Union


NOT_TOKEN = "NOT"
CASE_INSENSITIVE_MARKER = "[c]"


class CriteriaOperator(str, Enum):
    """Operators a comparison entry can render."""

    EQ = "=="
    NE = "<>"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    # Multi-value templates
    BETWEEN = "between"
    IN = "in"

    # String matching
    BEGINSWITH = "BEGINSWITH"
    ENDSWITH = "ENDSWITH"
    CONTAINS = "CONTAINS"


STRING_OPERATORS = frozenset({
    CriteriaOperator.BEGINSWITH,
    CriteriaOperator.ENDSWITH,
    CriteriaOperator.CONTAINS,
})


@dataclass(frozen=True)
class Comparison:
    """A predicate on one field with its raw, not yet bound, values."""

    field: str
    operator: CriteriaOperator
    values: Tuple[Any, ...] = ()
    case_insensitive: bool = False

    def __repr__(self) -> str:
        return f"Comparison({self.field} {self.operator.value} {list(self.values)!r})"


@dataclass(frozen=True)
class Keyword:
    """A bare logical token."""

    token: str

    AND: ClassVar["Keyword"]
    OR: ClassVar["Keyword"]
    NOT: ClassVar["Keyword"]

    @property
    def is_not(self) -> bool:
        return self.token == NOT_TOKEN


Keyword.AND = Keyword("AND")
Keyword.OR = Keyword("OR")
Keyword.NOT = Keyword(NOT_TOKEN)


CriteriaEntry = Union[Comparison, Keyword]


@dataclass
class CriteriaGroup:
    """Entries rendered together inside one pair of parentheses."""

    entries: List[CriteriaEntry] = field(default_factory=list)

    def append(self, entry: CriteriaEntry) -> None:
        self.entries.append(entry)

    def copy(self) -> "CriteriaGroup":
        return CriteriaGroup(list(self.entries))

    def __len__(self) -> int:
        return len(self.entries)


CriteriaElement = Union[Comparison, Keyword, CriteriaGroup]


@dataclass(frozen=True)
class CompiledQuery:
    """A serialized filter expression and the values its placeholders bind."""

    expression: str
    values: Tuple[Any, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.expression)

    def __str__(self) -> str:
        return self.expression

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expression": self.expression,
            "values": list(self.values),
        }


def _placeholders(count: int, bound: Tuple[Any, ...]) -> List[str]:
    start = len(bound)
    return [f"${start + i}" for i in range(count)]


def render_entry(
    entry: CriteriaEntry,
    bound: Tuple[Any, ...],
) -> Tuple[str, Tuple[Any, ...]]:
    """
    Render one entry against the values bound so far.

    Args:
        entry: The entry to render
        bound: Values already bound by earlier entries

    Returns:
        The text fragment and the extended tuple of bound values
    """
    if isinstance(entry, Keyword):
        return entry.token, bound

    op = entry.operator
    names = _placeholders(len(entry.values), bound)
    bound = bound + tuple(entry.values)
    name = entry.field

    if op == CriteriaOperator.BETWEEN:
        text = f"{name} >= {names[0]} AND {name} <= {names[1]}"
    elif op == CriteriaOperator.IN:
        text = "(" + " OR ".join(f"{name} == {p}" for p in names) + ")"
    else:
        token = op.value
        if op in STRING_OPERATORS and entry.case_insensitive:
            token += CASE_INSENSITIVE_MARKER
        text = f"{name} {token} {names[0]}"

    return text, bound


def serialize(criteria: Sequence[CriteriaElement]) -> CompiledQuery:
    """
    Linearize a criteria list into one expression.

    Top-level elements are joined with ``AND``; a group's members are
    joined with single spaces and parenthesized. A ``NOT`` marker anywhere,
    including inside a group, wraps the whole expression once and emits no
    text of its own.

    Args:
        criteria: Top-level entries and groups, in insertion order

    Returns:
        CompiledQuery with the expression and the bound values
    """
    bound: Tuple[Any, ...] = ()
    fragments: List[str] = []
    negated = False

    for element in criteria:
        if isinstance(element, CriteriaGroup):
            parts = []
            for entry in element.entries:
                if isinstance(entry, Keyword) and entry.is_not:
                    negated = True
                    continue
                text, bound = render_entry(entry, bound)
                parts.append(text)
            fragments.append("(" + " ".join(parts) + ")")
        elif isinstance(element, Keyword) and element.is_not:
            negated = True
        else:
            text, bound = render_entry(element, bound)
            fragments.append(text)

    expression = " AND ".join(fragments)
    if negated:
        expression = f"{NOT_TOKEN}({expression})"

    return CompiledQuery(expression=expression, values=bound)
