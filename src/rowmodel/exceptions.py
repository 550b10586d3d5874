"""
Exceptions raised by rowmodel itself.

Database errors are not wrapped: whatever psycopg raises reaches the caller
unchanged.
"""


class RowModelError(Exception):
    """Base exception for rowmodel errors."""
    pass


class ConfigurationError(RowModelError):
    """Raised when no database URL is configured."""
    pass


class ModelDefinitionError(RowModelError, TypeError):
    """Raised when a record class cannot be mapped onto a table."""
    pass


class UnknownFieldError(RowModelError, ValueError):
    """Raised when a filter or assignment names a field the record does not have."""
    pass


class EmptyKwargsError(RowModelError, ValueError):
    """Raised when an insert or update is given no fields."""
    pass


class MissingPrimaryKeyError(RowModelError, ValueError):
    """Raised when an operation needs the primary key but the record has none."""
    pass
