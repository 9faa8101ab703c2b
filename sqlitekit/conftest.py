import logging
import pytest
from sqlitekit.config import CrudConfig
from sqlitekit.crud import SqliteCrud
from sqlitekit.auth.manager import AuthCrud

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

USERS_DDL = "name VARCHAR(255) UNIQUE, email VARCHAR(255) UNIQUE, password TEXT"


@pytest.fixture
def config(tmp_path):
    return CrudConfig(database=str(tmp_path / "test.sqlite"), trace=True)


@pytest.fixture
def crud(config):
    with SqliteCrud(config) as crud:
        crud.create_table("users", USERS_DDL)
        yield crud


@pytest.fixture
def auth(config):
    with AuthCrud(config) as auth:
        auth.bootstrap_auth()
        yield auth
