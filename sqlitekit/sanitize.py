# sqlitekit/sanitize.py
"""Identifier, value and operator sanitizers used to assemble SQL text.

The contract is: ``sanitize_value`` escapes but never quotes. Every call site
that embeds a value as a literal goes through ``quote_value``, which adds the
single quotes exactly once.
"""
from typing import Any, Iterable, Sequence, Tuple
from sqlitekit.exceptions import UnrecognizedOperatorError, ValidationError

OPERATORS = (
    "<", "<=", ">", ">=", "!=", "=",
    "is null", "is not null",
    "is like", "is not like",
    "is in", "is not in",
)

NULL_OPERATORS = ("is null", "is not null")
LIST_OPERATORS = ("is in", "is not in")
LIKE_OPERATORS = ("is like", "is not like")

Where = Tuple[str, str, Any]
Order = Tuple[str, str]


def sanitize_id(identifier: str) -> str:
    """Quote an identifier with backticks, removing any embedded backtick."""
    return "`" + str(identifier).replace("`", "") + "`"


def sanitize_value(value: Any) -> Any:
    """Escape single quotes in strings by doubling them. Other values pass through."""
    if isinstance(value, str):
        return value.replace("'", "''")
    return value


def quote_value(value: Any) -> str:
    """Render a value as a SQL literal. Booleans become 1/0 the way sqlite
    stores them; None has no literal form and must use 'is null'."""
    if value is None:
        raise ValidationError("None cannot be compared with a value, use 'is null' or 'is not null'")
    if isinstance(value, bool):
        return "1" if value else "0"
    return f"'{sanitize_value(value)}'"


def sanitize_operator(operator: str) -> str:
    if operator not in OPERATORS:
        raise UnrecognizedOperatorError(f"Operator not recognized: {operator}")
    return operator


def sanitize_direction(direction: Any) -> str:
    return "DESC" if str(direction).upper() == "DESC" else "ASC"


def build_where_clause(column: str, operator: str, value: Any = None) -> str:
    """Render one (column, operator, value) tuple as a SQL condition."""
    sanitized_column = sanitize_id(column)
    sanitized_operator = sanitize_operator(operator)
    if sanitized_operator in NULL_OPERATORS:
        return f"{sanitized_column} {sanitized_operator.upper()}"
    if sanitized_operator in LIST_OPERATORS:
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValidationError(f"Value for {sanitized_operator} on {column} must be a list, got {type(value).__name__}")
        sql_operator = sanitized_operator.replace("is ", "", 1).upper()
        values = ", ".join(quote_value(v) for v in value)
        return f"{sanitized_column} {sql_operator} ({values})"
    if sanitized_operator in LIKE_OPERATORS:
        sql_operator = sanitized_operator.replace("is ", "", 1).upper()
        return f"{sanitized_column} {sql_operator} {quote_value(value)}"
    return f"{sanitized_column} {sanitized_operator} {quote_value(value)}"


def build_where_sql(wheres: Iterable[Sequence[Any]]) -> str:
    clauses = []
    for where in wheres:
        if not isinstance(where, (list, tuple)) or len(where) not in (2, 3):
            raise ValidationError(f"Invalid where clause {where!r}, expected (column, operator[, value])")
        clauses.append(build_where_clause(*where))
    return "WHERE " + " AND ".join(clauses) if clauses else ""


def build_order_sql(orders: Iterable[Sequence[Any]]) -> str:
    clauses = []
    for order in orders:
        column = order[0]
        direction = order[1] if len(order) > 1 else "ASC"
        clauses.append(f"{sanitize_id(column)} {sanitize_direction(direction)}")
    return "ORDER BY " + ", ".join(clauses) if clauses else ""
