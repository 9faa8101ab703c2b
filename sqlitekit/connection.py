# sqlitekit/connection.py
import sqlite3
import logging
from typing import NoReturn, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlitekit.config import CrudConfig
from sqlitekit.exceptions import DuplicateKeyError, NullValueError, ForeignKeyError, ExecutionError

logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class SqliteConnection:
    def __init__(self, config: CrudConfig):
        """Open the engine and the single connection held for the facade's lifetime."""
        self.config = config
        self.engine = self._create_engine()
        self.connection = self._connect()

    def _create_engine(self) -> Engine:
        """Private: Create a SQLAlchemy engine for the configured SQLite file."""
        try:
            engine = create_engine(self.config.connection_string, echo=False)
            event.listen(engine, "connect", _enable_foreign_keys)
            return engine
        except Exception as e:
            logger.error(f"Failed to create SQLAlchemy engine: {e}")
            raise

    def _connect(self) -> Connection:
        """Private: Open the connection in autocommit mode, one statement per transaction."""
        try:
            connection = self.engine.connect().execution_options(isolation_level="AUTOCOMMIT")
            logger.info(f"Opened SQLite database {self.config.database}")
            return connection
        except Exception as e:
            logger.error(f"Failed to connect to {self.config.database}: {e}")
            raise

    @property
    def driver_connection(self) -> sqlite3.Connection:
        """The underlying sqlite3 connection, for script execution."""
        return self.connection.connection.driver_connection

    def close(self):
        """Close the connection and dispose the engine."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        self.engine.dispose()


def handle_db_error(e: Exception, operation: str, target: Optional[str] = None) -> NoReturn:
    """Translate a driver error into the sqlitekit ExecutionError family and raise it."""
    orig = getattr(e, "orig", None) or e
    error_message = str(orig).lower()
    where = f" on {target}" if target else ""
    if isinstance(e, (IntegrityError, sqlite3.IntegrityError)):
        if "unique constraint" in error_message or "primary key" in error_message:
            raise DuplicateKeyError(f"Duplicate key error during {operation}{where}: {orig}") from e
        if "not null constraint" in error_message:
            raise NullValueError(f"Null value error during {operation}{where}: {orig}") from e
        if "foreign key constraint" in error_message:
            raise ForeignKeyError(f"Foreign key error during {operation}{where}: {orig}") from e
    if isinstance(e, (DBAPIError, sqlite3.Error)):
        raise ExecutionError(f"Error during {operation}{where}: {orig}") from e
    raise e
