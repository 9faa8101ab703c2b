# sqlitekit/acceptance_tests/dsl/crud_dsl.py
import asyncio
import logging
from typing import Dict, Any, List, Optional, Sequence
from sqlitekit.auth.manager import AuthCrud
from ..drivers.database_driver import DatabaseDriver

logger = logging.getLogger(__name__)

class DatabaseDSL:
    def __init__(self, driver: DatabaseDriver):
        self.driver = driver
        self.selected_table = None
        self.last_ids: List[int] = []
        self.last_changes = 0

    def create_table(self, table_name: str, contents: str):
        """Create a table with the given column definitions."""
        if not contents:
            raise ValueError("Column definitions must be provided")
        self.selected_table = table_name
        self.driver.create_table(table_name, contents)
        return self

    def setup_data(self, records: List[Dict[str, Any]]):
        """Insert initial data into the selected table."""
        if not self.selected_table:
            raise ValueError("No table selected")
        self.last_ids = self.driver.create(self.selected_table, records)
        logger.info(f"Inserted {len(records)} records into {self.selected_table}")
        return self

    def assert_table_has(self, expected_records: List[Dict[str, Any]], orders: Sequence[Sequence[Any]] = (("id", "ASC"),)):
        """Assert the table holds exactly the expected records, ignoring generated ids."""
        if not self.selected_table:
            raise ValueError("No table selected")
        actual = [{k: v for k, v in row.items() if k != "id"} for row in self.driver.read(self.selected_table, (), orders)]
        assert actual == expected_records, f"Table {self.selected_table} has {actual}"
        logger.info(f"Assertion passed for table {self.selected_table}")
        return self

    def assert_count(self, expected: int, wheres: Sequence[Sequence[Any]] = ()):
        if not self.selected_table:
            raise ValueError("No table selected")
        actual = len(self.driver.read(self.selected_table, wheres))
        assert actual == expected, f"Expected {expected} rows in {self.selected_table}, found {actual}"
        return self

    def assert_record_exists(self, wheres: Sequence[Sequence[Any]], expected_data: Dict[str, Any]):
        """Assert a single record matches the expected data."""
        if not self.selected_table:
            raise ValueError("No table selected")
        data = self.driver.read(self.selected_table, wheres)
        assert len(data) == 1, "Record not found"
        for key, value in expected_data.items():
            assert data[0][key] == value, f"Mismatch in {key}"
        return self

    def assert_changes(self, expected: int):
        assert self.last_changes == expected, f"Expected {expected} changed rows, got {self.last_changes}"
        return self

class CrudDSL(DatabaseDSL):
    def find_id(self, wheres: Sequence[Sequence[Any]]) -> int:
        rows = self.driver.read(self.selected_table, wheres)
        assert len(rows) == 1, f"Expected one row for {wheres}, found {len(rows)}"
        return rows[0]["id"]

    def execute_crud(self, operation: str, data: Optional[Dict[str, Any]] = None, wheres: Sequence[Sequence[Any]] = ()):
        """Execute a CRUD operation on the selected table; UPDATE and DELETE target the single row matching ``wheres``."""
        if not self.selected_table:
            raise ValueError("No table selected")
        if operation == "CREATE":
            self.last_ids = self.driver.create(self.selected_table, [data])
            self.last_changes = len(self.last_ids)
        elif operation == "READ":
            return self.driver.read(self.selected_table, wheres)
        elif operation == "UPDATE":
            self.last_changes = self.driver.update(self.selected_table, self.find_id(wheres), data)
        elif operation == "DELETE":
            self.last_changes = self.driver.delete(self.selected_table, self.find_id(wheres))
        else:
            raise ValueError(f"Invalid operation: {operation}")
        return self

class AuthDSL:
    def __init__(self, auth: AuthCrud):
        self.auth = auth
        self.sessions: Dict[str, Dict[str, Any]] = {}

    def bootstrap(self):
        asyncio.run(self.auth.initialize_auth())
        return self

    def login(self, name_or_email: str, password: str):
        self.sessions[name_or_email] = self.auth.login(name_or_email, password)
        return self

    def logout(self, name_or_email: str):
        self.auth.logout(self.sessions[name_or_email]["token"])
        return self

    def credentials(self, name_or_email: str):
        return self.auth.authenticate(self.sessions[name_or_email]["token"])

    def assert_has_group(self, name_or_email: str, group: str):
        assert self.credentials(name_or_email).has_group(group), f"{name_or_email} is not in {group}"
        return self

    def assert_has_permission(self, name_or_email: str, permission: str):
        assert self.credentials(name_or_email).has_permission(permission), f"{name_or_email} lacks {permission}"
        return self

    def authorized(self, name_or_email: str, operation: str, *args):
        return asyncio.run(self.auth.authorized.call(operation, self.credentials(name_or_email), *args))
