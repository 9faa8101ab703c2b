# sqlitekit/crud.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
from sqlalchemy.exc import DBAPIError
from sqlitekit.config import CrudConfig
from sqlitekit.connection import SqliteConnection, handle_db_error
from sqlitekit.exceptions import SqlTypeError, ValidationError
from sqlitekit.sanitize import build_order_sql, build_where_sql, sanitize_id
from sqlitekit.schema import get_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    changes: int
    last_insert_rowid: Optional[int] = None


class SqliteCrud:
    """Table/column level CRUD and DDL over one SQLite connection.

    Values in ``insert``/``update``/``delete`` are always bound as positional
    parameters. ``select`` inlines escaped literals for its where clauses.
    """

    def __init__(self, config: Optional[CrudConfig] = None):
        self.config = config or CrudConfig()
        self.db = SqliteConnection(self.config)
        self.connection = self.db.connection

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.db.close()

    def trace(self, message: str):
        logger.log(logging.INFO if self.config.trace else logging.DEBUG, message)

    def select(self, table: str, wheres: Iterable[Sequence[Any]] = (), orders: Iterable[Sequence[Any]] = ()) -> List[Dict[str, Any]]:
        """Return every row of ``table`` matching all ``wheres``, sorted by ``orders``.

        Args:
            table: Name of the table to query.
            wheres: (column, operator, value) tuples joined with AND.
            orders: (column, direction) tuples.

        Returns:
            List of dictionaries containing the matching records.
        """
        where_sql = build_where_sql(wheres)
        order_sql = build_order_sql(orders)
        sql = " ".join(part for part in (f"SELECT * FROM {sanitize_id(table)}", where_sql, order_sql) if part)
        return self.query(sql, operation="select", target=table)

    def insert(self, table: str, record: Mapping[str, Any]) -> ExecutionResult:
        if not record:
            raise ValidationError(f"Cannot insert an empty record into {table}")
        columns = ", ".join(sanitize_id(key) for key in record)
        placeholders = ", ".join("?" for _ in record)
        sql = f"INSERT INTO {sanitize_id(table)} ({columns}) VALUES ({placeholders})"
        return self.run(sql, tuple(record.values()), operation="insert", target=table)

    def update(self, table: str, id: Any, record: Mapping[str, Any]) -> ExecutionResult:
        if not record:
            raise ValidationError(f"Cannot update {table} with an empty record")
        set_clauses = ", ".join(f"{sanitize_id(key)} = ?" for key in record)
        sql = f"UPDATE {sanitize_id(table)} SET {set_clauses} WHERE id = ?"
        return self.run(sql, (*record.values(), id), operation="update", target=table)

    def delete(self, table: str, id: Any) -> ExecutionResult:
        sql = f"DELETE FROM {sanitize_id(table)} WHERE id = ?"
        return self.run(sql, id, operation="delete", target=table)

    def create_table(self, table: str, contents: str = "") -> None:
        extra = f", {contents}" if contents else ""
        return self.exec(f"CREATE TABLE IF NOT EXISTS {sanitize_id(table)} ( id INTEGER PRIMARY KEY AUTOINCREMENT{extra} )")

    def drop_table(self, table: str) -> None:
        return self.exec(f"DROP TABLE IF EXISTS {sanitize_id(table)}")

    def create_column(self, table: str, column: str, contents: str = "") -> None:
        return self.exec(f"ALTER TABLE {sanitize_id(table)} ADD COLUMN {sanitize_id(column)} {contents}".rstrip())

    def drop_column(self, table: str, column: str) -> None:
        return self.exec(f"ALTER TABLE {sanitize_id(table)} DROP COLUMN {sanitize_id(column)}")

    def rename_table(self, table: str, new_table: str) -> None:
        return self.exec(f"ALTER TABLE {sanitize_id(table)} RENAME TO {sanitize_id(new_table)}")

    def rename_column(self, table: str, column: str, new_column: str) -> None:
        return self.exec(f"ALTER TABLE {sanitize_id(table)} RENAME COLUMN {sanitize_id(column)} TO {sanitize_id(new_column)}")

    def exec(self, sql: str) -> None:
        """Execute SQL text verbatim. The text may hold several statements."""
        if not isinstance(sql, str):
            raise SqlTypeError(f"SQL must be a string, got {type(sql).__name__}")
        self.trace(f"[sqlite][exec] {sql}")
        try:
            self.db.driver_connection.executescript(sql)
        except Exception as e:
            logger.error(f"Failed to execute SQL: {sql}, error: {e}")
            handle_db_error(e, "exec")

    def get_schema(self) -> Dict[str, Dict[str, Any]]:
        try:
            return get_schema(self.connection)
        except DBAPIError as e:
            handle_db_error(e, "get_schema")

    def query(self, sql: str, parameters: Sequence[Any] = (), operation: str = "query", target: Optional[str] = None) -> List[Dict[str, Any]]:
        """Run a row-returning statement and materialize the result."""
        self.trace(f"[sqlite][query] {sql} {list(parameters)}")
        try:
            result = self.connection.exec_driver_sql(sql, tuple(parameters))
            return [dict(row._mapping) for row in result.fetchall()]
        except DBAPIError as e:
            logger.error(f"Failed to execute SQL: {sql}, error: {e}")
            handle_db_error(e, operation, target)

    def run(self, sql: str, parameters: Any, operation: str = "run", target: Optional[str] = None) -> ExecutionResult:
        """Run a parameterized write statement.

        A scalar ``parameters`` binds to the single placeholder of the statement.
        """
        if not isinstance(parameters, (list, tuple)):
            parameters = (parameters,)
        self.trace(f"[sqlite][run] {sql} {list(parameters)}")
        try:
            result = self.connection.exec_driver_sql(sql, tuple(parameters))
            return ExecutionResult(changes=result.rowcount, last_insert_rowid=result.lastrowid)
        except DBAPIError as e:
            logger.error(f"Failed to execute SQL: {sql}, error: {e}")
            handle_db_error(e, operation, target)
