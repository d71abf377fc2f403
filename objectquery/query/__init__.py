"""
Query building and evaluation for objectquery.

This module provides:
- The fluent ``ObjectQuery`` builder
- The criteria model and its serializer
- Filter expression parsing and evaluation
- Aggregations over results

Example:
    >>> from objectquery.query import ObjectQuery
    >>> 
    >>> query = ObjectQuery.where(people).greater_than("age", 30)
    >>> str(query), query.get_values()
    ('age > $0', [30])
    >>> query.count()
    2
"""

from .criteria import (
    Comparison,
    Keyword,
    CriteriaGroup,
    CriteriaOperator,
    CompiledQuery,
    render_entry,
    serialize,
)

from .filters import (
    Filter,
    FilterOperator,
    FieldFilter,
    AndFilter,
    OrFilter,
    NotFilter,
    ConstantFilter,
    evaluate_filter,
    get_field_value,
)

from .parser import (
    Tokenizer,
    ExpressionParser,
    tokenize,
    parse_expression,
)

from .aggregates import (
    sum_field,
    average_field,
    max_by,
    min_by,
    distinct_by,
)

from .builder import ObjectQuery, SortOrder

__all__ = [
    # Builder
    "ObjectQuery",
    "SortOrder",
    # Criteria
    "Comparison",
    "Keyword",
    "CriteriaGroup",
    "CriteriaOperator",
    "CompiledQuery",
    "render_entry",
    "serialize",
    # Filters
    "Filter",
    "FilterOperator",
    "FieldFilter",
    "AndFilter",
    "OrFilter",
    "NotFilter",
    "ConstantFilter",
    "evaluate_filter",
    "get_field_value",
    # Parser
    "Tokenizer",
    "ExpressionParser",
    "tokenize",
    "parse_expression",
    # Aggregates
    "sum_field",
    "average_field",
    "max_by",
    "min_by",
    "distinct_by",
]
