import pytest
from sqlitekit.exceptions import UnrecognizedOperatorError, ValidationError
from sqlitekit.sanitize import (
    build_order_sql,
    build_where_clause,
    build_where_sql,
    sanitize_direction,
    sanitize_id,
    sanitize_operator,
    sanitize_value,
)


@pytest.mark.parametrize("identifier", ["users", "us`ers", "`users`", "a``b", "`"])
def test_sanitize_id_strips_backticks_and_wraps(identifier):
    sanitized = sanitize_id(identifier)
    assert sanitized.startswith("`") and sanitized.endswith("`")
    assert "`" not in sanitized[1:-1]


def test_sanitize_value_doubles_quotes_without_quoting():
    assert sanitize_value("O'Brien") == "O''Brien"
    assert sanitize_value("plain") == "plain"
    assert sanitize_value(5) == 5


@pytest.mark.parametrize("operator", ["like", "LIKE", "in", "<>", "==", "; DROP TABLE users"])
def test_sanitize_operator_rejects_unknown(operator):
    with pytest.raises(UnrecognizedOperatorError):
        sanitize_operator(operator)


def test_sanitize_direction_defaults_to_asc():
    assert sanitize_direction("desc") == "DESC"
    assert sanitize_direction("DeSc") == "DESC"
    assert sanitize_direction("asc") == "ASC"
    assert sanitize_direction("sideways") == "ASC"


def test_where_clause_forms():
    assert build_where_clause("name", "=", "Juan") == "`name` = 'Juan'"
    assert build_where_clause("name", "is null") == "`name` IS NULL"
    assert build_where_clause("name", "is not null", "ignored") == "`name` IS NOT NULL"
    assert build_where_clause("name", "is like", "J%") == "`name` LIKE 'J%'"
    assert build_where_clause("name", "is not like", "J%") == "`name` NOT LIKE 'J%'"
    assert build_where_clause("id", "is in", [1, "it's"]) == "`id` IN ('1', 'it''s')"
    assert build_where_clause("id", "is not in", (1, 2)) == "`id` NOT IN ('1', '2')"


def test_in_operator_requires_a_list():
    with pytest.raises(ValidationError):
        build_where_clause("id", "is in", "1,2")


def test_where_and_order_sql():
    assert build_where_sql([]) == ""
    assert build_where_sql([("a", "=", 1), ("b", ">", 2)]) == "WHERE `a` = '1' AND `b` > '2'"
    assert build_order_sql([]) == ""
    assert build_order_sql([("a", "desc"), ("b", "asc")]) == "ORDER BY `a` DESC, `b` ASC"


def test_booleans_render_as_integers():
    assert build_where_clause("active", "=", True) == "`active` = 1"
    assert build_where_clause("active", "!=", False) == "`active` != 0"
    assert build_where_clause("flag", "is in", [True, "x"]) == "`flag` IN (1, 'x')"


@pytest.mark.parametrize("where", [
    ("note", "=", None),
    ("note", "!=", None),
    ("note", "is like", None),
    ("note", "is in", ["a", None]),
    ("note", "="),
])
def test_none_value_points_to_is_null(where):
    with pytest.raises(ValidationError, match="is null"):
        build_where_sql([where])


@pytest.mark.parametrize("where", [("name",), ("name", "=", "a", "b"), (), "name"])
def test_where_sql_rejects_malformed_tuples(where):
    with pytest.raises(ValidationError, match="Invalid where clause"):
        build_where_sql([where])
