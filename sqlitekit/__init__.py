"""Query building and session authentication over an embedded SQLite database."""
from sqlitekit.config import CrudConfig, configure_logging
from sqlitekit.crud import ExecutionResult, SqliteCrud
from sqlitekit.auth import AuthCrud, Credentials, RuleFirewall

__all__ = [
    "AuthCrud",
    "CrudConfig",
    "Credentials",
    "ExecutionResult",
    "RuleFirewall",
    "SqliteCrud",
    "configure_logging",
]
