import pytest
from sqlitekit.crud import ExecutionResult
from sqlitekit.exceptions import (
    DuplicateKeyError,
    ExecutionError,
    SqlTypeError,
    UnrecognizedOperatorError,
    ValidationError,
)

JUAN = {"name": "Juan", "email": "Juan@correos.org", "password": "123456"}


def test_insert_returns_changes_and_rowid(crud):
    result = crud.insert("users", JUAN)
    assert isinstance(result, ExecutionResult)
    assert result.changes == 1
    assert result.last_insert_rowid == 1


def test_insert_then_select_on_unique_column(crud):
    result = crud.insert("users", JUAN)
    rows = crud.select("users", [("email", "=", "Juan@correos.org")])
    assert rows == [{"id": result.last_insert_rowid, **JUAN}]


def test_select_escapes_quotes(crud):
    crud.insert("users", {"name": "O'Brien", "email": "ob@x.org", "password": "p"})
    rows = crud.select("users", [("name", "=", "O'Brien")])
    assert len(rows) == 1
    assert crud.select("users", [("name", "=", "x' OR '1'='1")]) == []


def test_select_operators_and_order(crud):
    for name in ("b", "a", "c"):
        crud.insert("users", {"name": name, "email": f"{name}@x.org", "password": None})
    assert [r["name"] for r in crud.select("users", orders=[("name", "desc")])] == ["c", "b", "a"]
    assert [r["name"] for r in crud.select("users", [("name", "is in", ["a", "c"])], [("name", "ASC")])] == ["a", "c"]
    assert [r["name"] for r in crud.select("users", [("name", "is not in", ["a", "c"])])] == ["b"]
    assert len(crud.select("users", [("password", "is null")])) == 3
    assert crud.select("users", [("password", "is not null")]) == []
    assert [r["name"] for r in crud.select("users", [("email", "is like", "a@%")])] == ["a"]
    assert [r["id"] for r in crud.select("users", [("id", ">", 1), ("id", "<=", 2)])] == [2]


def test_select_with_unknown_operator_fails_before_sql(crud, caplog):
    with caplog.at_level("DEBUG", logger="sqlitekit.crud"):
        with pytest.raises(UnrecognizedOperatorError):
            crud.select("users", [("name", "LIKE", "x")])
    assert "[sqlite][query]" not in caplog.text


def test_select_in_requires_list(crud):
    with pytest.raises(ValidationError):
        crud.select("users", [("id", "is in", 1)])


def test_update_changes_only_given_field(crud):
    row_id = crud.insert("users", JUAN).last_insert_rowid
    assert crud.update("users", row_id, {"name": "Juan Actualizado"}).changes == 1
    assert crud.select("users", [("id", "=", row_id)]) == [{**JUAN, "id": row_id, "name": "Juan Actualizado"}]
    assert crud.update("users", 999, {"name": "nobody"}).changes == 0


def test_delete_removes_row(crud):
    row_id = crud.insert("users", JUAN).last_insert_rowid
    assert crud.delete("users", row_id).changes == 1
    assert crud.select("users", [("id", "=", row_id)]) == []
    assert crud.delete("users", row_id).changes == 0


def test_empty_records_are_rejected(crud):
    with pytest.raises(ValidationError):
        crud.insert("users", {})
    with pytest.raises(ValidationError):
        crud.update("users", 1, {})


def test_unique_violation_raises_duplicate_key(crud):
    crud.insert("users", JUAN)
    with pytest.raises(DuplicateKeyError):
        crud.insert("users", JUAN)


def test_ddl_operations(crud):
    crud.create_table("books", "title TEXT")
    crud.create_column("books", "author", "TEXT DEFAULT 'anon'")
    crud.insert("books", {"title": "Dune"})
    assert crud.select("books") == [{"id": 1, "title": "Dune", "author": "anon"}]

    crud.rename_column("books", "author", "writer")
    crud.rename_table("books", "novels")
    assert crud.select("novels")[0]["writer"] == "anon"

    crud.drop_column("novels", "writer")
    assert list(crud.select("novels")[0]) == ["id", "title"]

    crud.drop_table("novels")
    with pytest.raises(ExecutionError):
        crud.select("novels")


def test_create_table_is_idempotent(crud):
    crud.create_table("users", "other TEXT")
    assert "other" not in crud.get_schema()["users"]["columns"]


def test_exec_runs_verbatim_and_checks_type(crud):
    crud.exec("INSERT INTO users (name, email) VALUES ('x', 'x@x'); INSERT INTO users (name, email) VALUES ('y', 'y@y');")
    assert len(crud.select("users")) == 2
    with pytest.raises(TypeError):
        crud.exec(b"SELECT 1")
    with pytest.raises(SqlTypeError):
        crud.exec(None)
    with pytest.raises(ExecutionError):
        crud.exec("SELEC nothing")


def test_five_user_scenario(crud):
    for name in ("Juan", "Pepe", "Tomás", "Orlando", "Kentucky"):
        crud.insert("users", {"name": name, "email": f"{name}@correos.org", "password": "123456"})

    users = crud.select("users", [["name", "=", "Juan"]], [["name", "ASC"]])
    assert len(users) == 1
    assert users[0]["name"] == "Juan"

    assert crud.update("users", users[0]["id"], {"name": "Juan Actualizado"}).changes == 1
    assert crud.select("users", [["id", "=", users[0]["id"]]])[0]["name"] == "Juan Actualizado"

    assert crud.delete("users", users[0]["id"]).changes == 1
    assert len(crud.select("users")) == 4


def test_select_by_boolean_and_rejects_none(crud):
    crud.create_table("flags", "active INTEGER, note TEXT")
    crud.insert("flags", {"active": True, "note": None})
    crud.insert("flags", {"active": False, "note": "None"})
    assert [r["id"] for r in crud.select("flags", [("active", "=", True)])] == [1]
    assert [r["id"] for r in crud.select("flags", [("active", "=", False)])] == [2]
    assert [r["id"] for r in crud.select("flags", [("note", "is null")])] == [1]
    with pytest.raises(ValidationError, match="is null"):
        crud.select("flags", [("note", "=", None)])


def test_select_rejects_malformed_where(crud):
    with pytest.raises(ValidationError):
        crud.select("users", [("name", "=", "a", "extra")])
