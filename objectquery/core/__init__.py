"""
Core objectquery components.
"""

from .exceptions import (
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
from .collection import Collection

__all__ = [
    "Collection",
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
