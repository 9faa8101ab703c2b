# sqlitekit/auth/manager.py
import inspect
import logging
from typing import Any, Callable, Dict, Optional
from sqlitekit.config import CrudConfig
from sqlitekit.crud import ExecutionResult, SqliteCrud
from sqlitekit.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ExecutionError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from sqlitekit.auth.credentials import Credentials
from sqlitekit.auth.firewall import load_firewall
from sqlitekit.auth.passwords import hash_password, verify_password
from sqlitekit.auth.tokens import generate_token
from sqlitekit.auth.schema import (
    ADMIN_GROUP,
    ADMIN_PERMISSION,
    AUTH_TABLES,
    CREDENTIALS_SQL,
    GROUPS,
    PERMISSIONS,
    PERMISSIONS_AND_GROUPS,
    SESSIONS,
    USERS,
    USERS_AND_GROUPS,
)

logger = logging.getLogger(__name__)

BOOTSTRAP_ERRORS = (ExecutionError, ValidationError, NotFoundError)

ErrorNotifier = Callable[[str, Exception], None]


def _report_bootstrap_error(step: str, error: Exception):
    logger.warning(f"Auth bootstrap step '{step}' skipped: {error}")


def _public_user(row: Dict[str, Any]) -> Dict[str, Any]:
    user = dict(row)
    user.pop("password", None)
    return user


def _token_hint(token: Any) -> str:
    return f"{str(token)[:8]}..." if token else repr(token)


class AuthorizedOperations:
    """Firewall-gated versions of the SqliteCrud operations.

    Each method takes the caller's credentials first, then the arguments of the
    underlying operation. The gate runs before the operation; a denial raised
    by the firewall propagates and the operation never runs.
    """

    OPERATIONS = (
        "select", "insert", "update", "delete",
        "create_table", "drop_table", "create_column", "drop_column",
        "rename_table", "rename_column", "exec", "get_schema",
    )

    def __init__(self, facade: 'AuthCrud'):
        self.facade = facade

    async def call(self, operation: str, credentials: Optional[Credentials], *args, **kwargs) -> Any:
        if operation not in self.OPERATIONS:
            raise ValidationError(f"Operation cannot be authorized: {operation}")
        method = getattr(self.facade, operation)
        try:
            bound = inspect.signature(method).bind(*args, **kwargs)
        except TypeError as e:
            raise ValidationError(f"Invalid arguments for {operation}: {e}") from e
        await self.facade.authorize(credentials, operation, dict(bound.arguments))
        return method(*bound.args, **bound.kwargs)

    async def select(self, credentials, table, wheres=(), orders=()):
        return await self.call("select", credentials, table, wheres, orders)

    async def insert(self, credentials, table, record):
        return await self.call("insert", credentials, table, record)

    async def update(self, credentials, table, id, record):
        return await self.call("update", credentials, table, id, record)

    async def delete(self, credentials, table, id):
        return await self.call("delete", credentials, table, id)

    async def create_table(self, credentials, table, contents=""):
        return await self.call("create_table", credentials, table, contents)

    async def drop_table(self, credentials, table):
        return await self.call("drop_table", credentials, table)

    async def create_column(self, credentials, table, column, contents=""):
        return await self.call("create_column", credentials, table, column, contents)

    async def drop_column(self, credentials, table, column):
        return await self.call("drop_column", credentials, table, column)

    async def rename_table(self, credentials, table, new_table):
        return await self.call("rename_table", credentials, table, new_table)

    async def rename_column(self, credentials, table, column, new_column):
        return await self.call("rename_column", credentials, table, column, new_column)

    async def exec(self, credentials, sql):
        return await self.call("exec", credentials, sql)

    async def get_schema(self, credentials):
        return await self.call("get_schema", credentials)


class AuthCrud(SqliteCrud):
    """SqliteCrud plus users, groups, permissions and session tokens.

    Authorization is delegated to a firewall object exposing
    ``emit(operation, context)``. Without one, the facade runs with
    enforcement disabled and ``authorize`` lets every call through.
    """

    def __init__(self, config: Optional[CrudConfig] = None, firewall: Any = None, on_error: Optional[ErrorNotifier] = None):
        super().__init__(config)
        self.firewall = firewall
        self.on_error = on_error or _report_bootstrap_error
        self.authorized = AuthorizedOperations(self)
        self._log_enforcement()

    @property
    def enforcement(self) -> str:
        if self.firewall is not None or self.config.firewall_file:
            return "enabled"
        return "disabled"

    def _log_enforcement(self):
        if self.enforcement == "disabled":
            logger.warning("Authorization enforcement: disabled (no firewall configured), every authorized call is allowed")
        else:
            logger.info("Authorization enforcement: enabled")

    async def initialize_auth(self):
        """Load the configured firewall, then create and seed the auth tables."""
        if self.firewall is None and self.config.firewall_file:
            self.firewall = await load_firewall(self.config.firewall_file)
        self.bootstrap_auth()

    def bootstrap_auth(self):
        """Create the auth tables and seed the admin user, group and permission.

        Each step runs on its own: a failure is passed to ``on_error`` and the
        remaining steps still run. Seed rows are only inserted when missing, so
        running this again on an initialized database changes nothing.
        """
        steps = [(f"create table {table}", lambda table=table, contents=contents: self.create_table(table, contents))
                 for table, contents in AUTH_TABLES]
        steps += [
            ("seed admin user", self._seed_admin_user),
            ("seed administrators group", lambda: self._seed_named(GROUPS, ADMIN_GROUP)),
            ("seed administrate permission", lambda: self._seed_named(PERMISSIONS, ADMIN_PERMISSION)),
            ("link admin user to administrators", self._seed_admin_membership),
            ("link administrate to administrators", self._seed_admin_grant),
        ]
        failures = 0
        for description, step in steps:
            try:
                step()
                logger.debug(f"Auth bootstrap step '{description}' done")
            except BOOTSTRAP_ERRORS as e:
                failures += 1
                self.on_error(description, e)
        logger.info(f"Auth bootstrap finished ({len(steps) - failures}/{len(steps)} steps succeeded)")
        self._log_enforcement()

    def _seed_admin_user(self):
        if self.select(USERS, [("name", "=", self.config.admin_name)]):
            return
        self.create_user(self.config.admin_name, self.config.admin_email, self.config.admin_password)

    def _seed_named(self, table: str, record: Dict[str, Any]):
        if self.select(table, [("name", "=", record["name"])]):
            return
        self.insert(table, record)

    def _seed_admin_membership(self):
        user = self._find_one(USERS, self.config.admin_name)
        group = self._find_one(GROUPS, ADMIN_GROUP["name"])
        self.add_user_to_group(user["id"], group["id"])

    def _seed_admin_grant(self):
        permission = self._find_one(PERMISSIONS, ADMIN_PERMISSION["name"])
        group = self._find_one(GROUPS, ADMIN_GROUP["name"])
        self.add_permission_to_group(permission["id"], group["id"])

    def _find_one(self, table: str, name: str) -> Dict[str, Any]:
        rows = self.select(table, [("name", "=", name)], [("id", "ASC")])
        if not rows:
            raise NotFoundError(f"No row named {name} in {table}")
        return rows[0]

    def create_user(self, name: str, email: str, password: str) -> ExecutionResult:
        stored = hash_password(password) if self.config.hash_passwords else password
        result = self.insert(USERS, {"name": name, "email": email, "password": stored})
        logger.info(f"Added user: {name}")
        return result

    def create_group(self, name: str, description: str = "") -> ExecutionResult:
        return self.insert(GROUPS, {"name": name, "description": description})

    def create_permission(self, name: str, description: str = "") -> ExecutionResult:
        return self.insert(PERMISSIONS, {"name": name, "description": description})

    def add_user_to_group(self, user_id: int, group_id: int) -> Optional[ExecutionResult]:
        """Link a user to a group. Returns None when the link already exists."""
        if self.select(USERS_AND_GROUPS, [("id_user", "=", user_id), ("id_group", "=", group_id)]):
            return None
        return self.insert(USERS_AND_GROUPS, {"name": f"user {user_id} in group {group_id}", "id_user": user_id, "id_group": group_id})

    def add_permission_to_group(self, permission_id: int, group_id: int) -> Optional[ExecutionResult]:
        """Grant a permission to a group. Returns None when the grant already exists."""
        if self.select(PERMISSIONS_AND_GROUPS, [("id_permission", "=", permission_id), ("id_group", "=", group_id)]):
            return None
        return self.insert(PERMISSIONS_AND_GROUPS, {"name": f"permission {permission_id} for group {group_id}", "id_permission": permission_id, "id_group": group_id})

    def login(self, name_or_email: str, password: str) -> Dict[str, Any]:
        """Open (or reuse) the session of the user matching ``name_or_email``.

        Returns:
            The session record: ``{"id", "id_user", "token"}``.
        """
        users = self.query(
            f"SELECT * FROM `{USERS}` WHERE name = ? OR email = ? ORDER BY id",
            (name_or_email, name_or_email), operation="login", target=USERS,
        )
        if not users:
            raise NotFoundError(f"User not found: {name_or_email}")
        user = users[0]
        if not verify_password(password, user["password"], hashed=self.config.hash_passwords):
            logger.warning(f"Authentication failed for user: {name_or_email}")
            raise InvalidCredentialsError(f"Invalid password for user: {name_or_email}")

        sessions = self.select(SESSIONS, [("id_user", "=", user["id"])], [("id", "ASC")])
        if sessions:
            return sessions[0]
        result = self.insert(SESSIONS, {"id_user": user["id"], "token": generate_token(self.config.token_length)})
        logger.info(f"Opened session for user: {user['name']}")
        return self.query(f"SELECT * FROM `{SESSIONS}` WHERE id = ?", (result.last_insert_rowid,), operation="login", target=SESSIONS)[0]

    def logout(self, token: str) -> ExecutionResult:
        result = self.run(f"DELETE FROM `{SESSIONS}` WHERE token = ?", token, operation="logout", target=SESSIONS)
        if result.changes:
            logger.info(f"Closed session {_token_hint(token)}")
        return result

    def authenticate(self, token: str) -> Credentials:
        """Resolve a session token to the user's credentials."""
        sessions = self.query(f"SELECT * FROM `{SESSIONS}` WHERE token = ?", (token,), operation="authenticate", target=SESSIONS)
        if not sessions:
            raise AuthenticationError(f"No session matches token {_token_hint(token)}")
        users = self.query(f"SELECT * FROM `{USERS}` WHERE id = ?", (sessions[0]["id_user"],), operation="authenticate", target=USERS)
        if not users:
            raise AuthenticationError(f"Session {_token_hint(token)} points to a missing user")

        groups: Dict[int, Dict[str, Any]] = {}
        permissions: Dict[int, Dict[str, Any]] = {}
        for row in self.query(CREDENTIALS_SQL, (users[0]["id"],), operation="authenticate"):
            groups.setdefault(row["group_id"], {
                "id": row["group_id"], "name": row["group_name"], "description": row["group_description"],
            })
            if row["permission_id"] is not None:
                permissions.setdefault(row["permission_id"], {
                    "id": row["permission_id"], "name": row["permission_name"], "description": row["permission_description"],
                })
        return Credentials(
            user=_public_user(users[0]),
            groups=tuple(groups.values()),
            permissions=tuple(permissions.values()),
            token=token,
        )

    async def authorize(self, credentials: Optional[Credentials], operation: str, parameters: Dict[str, Any]):
        """Ask the firewall whether ``operation`` may run. Raises to deny."""
        if self.firewall is None:
            if self.config.firewall_file:
                raise ConfigurationError(f"Firewall {self.config.firewall_file} is configured but not loaded, call initialize_auth() first")
            return None
        outcome = self.firewall.emit(operation, {"credentials": credentials, "parameters": parameters, "facade": self})
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome
