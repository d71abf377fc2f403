"""
objectquery - A fluent query builder for object collections.

Example:
    >>> from objectquery import ObjectQuery, Collection
    >>> 
    >>> people = Collection([
    ...     {"id": 1, "name": "clinton", "age": 18},
    ...     {"id": 2, "name": "necati", "age": 34},
    ...     {"id": 4, "name": "elias", "age": 42},
    ... ], name="Person")
    >>> 
    >>> query = ObjectQuery.where(people).greater_than("age", 30).sort("age", "DESC")
    >>> [p["name"] for p in query.find_all()]
    ['elias', 'necati']
"""

from .core import (
    # Main classes
    Collection,
    # Exceptions
    ObjectQueryError,
    QueryError,
    UnsupportedOperationError,
    MissingCollectionError,
    EmptyResultError,
    ExpressionError,
    ExpressionSyntaxError,
    PlaceholderError,
    StorageError,
    SerializationError,
    ConfigError,
)

from .query import (
    ObjectQuery,
    SortOrder,
    CompiledQuery,
    parse_expression,
)

__version__ = "0.1.0"
__author__ = "objectquery Team"

__all__ = [
    # Main classes
    "ObjectQuery",
    "Collection",
    "SortOrder",
    "CompiledQuery",
    "parse_expression",
    # Exceptions
    "ObjectQueryError",
    "QueryError",
    "UnsupportedOperationError",
    "MissingCollectionError",
    "EmptyResultError",
    "ExpressionError",
    "ExpressionSyntaxError",
    "PlaceholderError",
    "StorageError",
    "SerializationError",
    "ConfigError",
]
