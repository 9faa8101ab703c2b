# sqlitekit/acceptance_tests/test_crud.py
import pytest
from sqlitekit.config import CrudConfig
from sqlitekit.crud import SqliteCrud
from .dsl.crud_dsl import CrudDSL
from .drivers.sqlite_crud_driver import SqliteCrudDriver

USERS = [
    {"name": "Juan", "email": "Juan@correos.org", "password": "123456"},
    {"name": "Pepe", "email": "Pepe@correos.org", "password": "123456"},
    {"name": "Tomás", "email": "Tomas@correos.org", "password": "123456"},
    {"name": "Orlando", "email": "Orlando@correos.org", "password": "123456"},
    {"name": "Kentucky", "email": "Kentucky@correos.org", "password": "123456"},
]

@pytest.fixture
def dsl(tmp_path):
    with SqliteCrud(CrudConfig(database=str(tmp_path / "acceptance.sqlite"))) as crud:
        yield CrudDSL(SqliteCrudDriver(crud))

def test_crud_operations(dsl):
    """Insert five users, then update and delete one of them."""
    dsl.create_table("users", "name VARCHAR(255) UNIQUE, email VARCHAR(255) UNIQUE, password TEXT") \
       .setup_data(USERS) \
       .assert_count(5) \
       .assert_record_exists([["name", "=", "Juan"]], {"email": "Juan@correos.org"})

    juan = dsl.execute_crud("READ", wheres=[["name", "=", "Juan"]])
    assert len(juan) == 1 and juan[0]["name"] == "Juan"

    dsl.execute_crud("UPDATE", {"name": "Juan Actualizado"}, [["name", "=", "Juan"]]) \
       .assert_changes(1) \
       .assert_record_exists([["id", "=", juan[0]["id"]]], {"name": "Juan Actualizado", "password": "123456"})

    dsl.execute_crud("DELETE", wheres=[["name", "=", "Juan Actualizado"]]) \
       .assert_changes(1) \
       .assert_count(4) \
       .assert_table_has(USERS[1:])

def test_create_then_read_with_orders(dsl):
    dsl.create_table("spend_plan", "category TEXT, amount REAL") \
       .setup_data([{"category": "Food", "amount": 50.0}, {"category": "Travel", "amount": 100.0}]) \
       .execute_crud("CREATE", {"category": "Books", "amount": 25.0}) \
       .assert_changes(1) \
       .assert_table_has(
           [{"category": "Travel", "amount": 100.0}, {"category": "Food", "amount": 50.0}, {"category": "Books", "amount": 25.0}],
           orders=[["amount", "DESC"]],
       ) \
       .assert_count(2, [["amount", ">=", 50]])
