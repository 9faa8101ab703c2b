# sqlitekit/config.py
import os
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from dotenv import dotenv_values
from sqlitekit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

ENV_PREFIX = "SQLITEKIT_"

_TRUTHY = ("1", "true", "yes", "y", "on")
_FALSY = ("0", "false", "no", "n", "off")


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    """Parse a boolean setting, falling back to ``default`` when unset or unrecognized."""
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


@dataclass(frozen=True)
class CrudConfig:
    """Runtime configuration for SqliteCrud and AuthCrud.

    Every field can be set from a .env file or the environment with the
    ``SQLITEKIT_`` prefix (e.g. ``SQLITEKIT_DATABASE``, ``SQLITEKIT_FIREWALL_FILE``).
    """

    database: str = ":memory:"
    trace: bool = False
    firewall_file: Optional[str] = None
    hash_passwords: bool = True
    admin_name: str = "admin"
    admin_email: str = "admin@localhost"
    admin_password: str = "admin"
    token_length: int = 100

    @property
    def connection_string(self) -> str:
        """SQLAlchemy URL for the configured database."""
        if self.database.startswith("sqlite:"):
            return self.database
        if self.database in ("", ":memory:"):
            return "sqlite:///:memory:"
        return f"sqlite:///{self.database}"

    @staticmethod
    def from_env(env_file: Optional[str] = None) -> 'CrudConfig':
        """Build a config from an optional .env file overlaid by os.environ."""
        values: Dict[str, Optional[str]] = {}
        if env_file:
            if not os.path.exists(env_file):
                logger.warning(f"Env file not found: {env_file}, using environment only")
            else:
                values.update(dotenv_values(env_file))
        values.update({k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)})

        def get(name: str) -> Optional[str]:
            raw = values.get(ENV_PREFIX + name)
            return raw if raw not in (None, "") else None

        defaults = CrudConfig()
        raw_length = get("TOKEN_LENGTH")
        try:
            token_length = int(raw_length) if raw_length else defaults.token_length
        except ValueError as e:
            raise ConfigurationError(f"{ENV_PREFIX}TOKEN_LENGTH must be an integer, got {raw_length!r}") from e
        return CrudConfig(
            database=get("DATABASE") or defaults.database,
            trace=_parse_bool(get("TRACE"), defaults.trace),
            firewall_file=get("FIREWALL_FILE"),
            hash_passwords=_parse_bool(get("HASH_PASSWORDS"), defaults.hash_passwords),
            admin_name=get("ADMIN_NAME") or defaults.admin_name,
            admin_email=get("ADMIN_EMAIL") or defaults.admin_email,
            admin_password=get("ADMIN_PASSWORD") or defaults.admin_password,
            token_length=token_length,
        )


def configure_logging(level: str = "INFO"):
    """Configure global logging settings."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.info(f"Logging level set to {level}")
