# sqlitekit/schema.py
import logging
from typing import Any, Dict
from sqlalchemy.engine import Connection

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
SELECT
    m.name AS table_name,
    p.name AS column_name,
    p.type AS column_type,
    p."notnull" AS column_notnull,
    p.pk AS column_pk,
    fk."table" AS foreign_table,
    fk."to" AS foreign_column
FROM sqlite_master AS m
JOIN pragma_table_info(m.name) AS p
LEFT JOIN pragma_foreign_key_list(m.name) AS fk ON fk."from" = p.name
WHERE m.type = 'table' AND m.name NOT LIKE 'sqlite_%'
ORDER BY m.name, p.cid
"""


def get_schema(connection: Connection) -> Dict[str, Dict[str, Any]]:
    """Describe every user table of the database.

    Args:
        connection: Open SQLAlchemy connection to a SQLite database.

    Returns:
        Dictionary mapping table names to ``{"columns": {...}, "fks": {...}}``.
        Each column descriptor carries ``name``, ``type``, ``notnull`` and ``pk``,
        plus ``foreign_table``/``foreign_column`` when the column references
        another table. ``fks`` maps column names to their reference.
    """
    rows = connection.exec_driver_sql(SCHEMA_SQL).mappings().all()
    schema: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        table = schema.setdefault(row["table_name"], {"columns": {}, "fks": {}})
        column = table["columns"].setdefault(row["column_name"], {
            "name": row["column_name"],
            "type": row["column_type"],
            "notnull": bool(row["column_notnull"]),
            "pk": bool(row["column_pk"]),
        })
        if row["foreign_table"] is not None:
            reference = {"foreign_table": row["foreign_table"], "foreign_column": row["foreign_column"]}
            column.update(reference)
            table["fks"][row["column_name"]] = reference
    logger.debug(f"Read schema for {len(schema)} tables")
    return schema
