"""
Custom exceptions for objectquery.
"""


class ObjectQueryError(Exception):
    """Base exception for objectquery."""
    pass


class QueryError(ObjectQueryError):
    """Error related to query builder operations."""
    pass


class UnsupportedOperationError(QueryError, NotImplementedError):
    """Predicate method that the builder does not implement."""
    
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f'Not yet supported "{operation}"')


class MissingCollectionError(QueryError):
    """Terminal operation called on a query without a collection."""
    pass


class EmptyResultError(QueryError):
    """Aggregate is undefined for an empty result."""
    pass


class ExpressionError(ObjectQueryError):
    """Error related to filter expression evaluation."""
    pass


class ExpressionSyntaxError(ExpressionError):
    """Filter expression could not be parsed."""
    
    def __init__(self, message: str, position: int = -1):
        self.position = position
        super().__init__(message)


class PlaceholderError(ExpressionError):
    """Placeholder refers to a value that was not bound."""
    pass


class StorageError(ObjectQueryError):
    """Error related to storage operations."""
    pass


class SerializationError(StorageError):
    """Error during serialization/deserialization."""
    pass


class ConfigError(ObjectQueryError):
    """Invalid configuration value."""
    pass
