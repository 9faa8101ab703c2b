# sqlitekit/acceptance_tests/drivers/sqlite_crud_driver.py
from typing import Dict, Any, List, Sequence
from sqlitekit.crud import SqliteCrud
from .database_driver import DatabaseDriver
import logging

logger = logging.getLogger(__name__)

class SqliteCrudDriver(DatabaseDriver):
    def __init__(self, crud: SqliteCrud):
        self.crud = crud

    def create_table(self, table_name: str, contents: str):
        """Create a table; the id column is added by SqliteCrud."""
        self.crud.create_table(table_name, contents)
        logger.info(f"Created table {table_name} with SqliteCrud")

    def create(self, table_name: str, data: List[Dict[str, Any]]) -> List[int]:
        """Insert records one by one and return their generated ids."""
        return [self.crud.insert(table_name, record).last_insert_rowid for record in data]

    def read(self, table_name: str, wheres: Sequence[Sequence[Any]] = (), orders: Sequence[Sequence[Any]] = ()) -> List[Dict[str, Any]]:
        return self.crud.select(table_name, wheres, orders)

    def update(self, table_name: str, id: int, data: Dict[str, Any]) -> int:
        return self.crud.update(table_name, id, data).changes

    def delete(self, table_name: str, id: int) -> int:
        return self.crud.delete(table_name, id).changes
