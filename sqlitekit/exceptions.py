# sqlitekit/exceptions.py
class SqliteKitError(Exception):
    """Base exception for sqlitekit errors."""
    pass

class ValidationError(SqliteKitError):
    """Raised when a call is rejected before any SQL is built."""
    pass

class UnrecognizedOperatorError(ValidationError):
    """Raised when a where-clause operator is not in the allow-list."""
    pass

class SqlTypeError(ValidationError, TypeError):
    """Raised when exec() receives something other than SQL text."""
    pass

class NotFoundError(SqliteKitError):
    """Raised when a login lookup matches no user."""
    pass

class InvalidCredentialsError(SqliteKitError):
    """Raised when the supplied password does not match."""
    pass

class AuthenticationError(SqliteKitError):
    """Raised when a session token is unknown."""
    pass

class AuthorizationError(SqliteKitError):
    """Raised by a firewall to deny an operation."""
    pass

class ExecutionError(SqliteKitError):
    """Raised for errors surfaced by the database engine."""
    pass

class DuplicateKeyError(ExecutionError):
    """Raised when a unique or primary key constraint is violated."""
    pass

class NullValueError(ExecutionError):
    """Raised when a null value is inserted into a non-nullable field."""
    pass

class ForeignKeyError(ExecutionError):
    """Raised when a foreign key constraint is violated."""
    pass

class ConfigurationError(SqliteKitError):
    """Raised for unusable configuration (missing or malformed files)."""
    pass
