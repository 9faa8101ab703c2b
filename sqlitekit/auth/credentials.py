# sqlitekit/auth/credentials.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple


def _freeze(row: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(row))


@dataclass(frozen=True)
class Credentials:
    """Identity resolved from a session token: the user, its groups and the
    permissions reachable through those groups.

    The user and every group/permission row are stored as read-only copies,
    so a bundle handed to a firewall cannot be altered by it.
    """

    user: Mapping[str, Any]
    groups: Tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    permissions: Tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    token: str = ""

    def __post_init__(self):
        object.__setattr__(self, "user", _freeze(self.user))
        object.__setattr__(self, "groups", tuple(_freeze(group) for group in self.groups))
        object.__setattr__(self, "permissions", tuple(_freeze(permission) for permission in self.permissions))

    def __hash__(self):
        return hash((
            self.user.get("id"),
            self.token,
            tuple(group.get("id") for group in self.groups),
            tuple(permission.get("id") for permission in self.permissions),
        ))

    @property
    def user_id(self) -> int:
        return self.user["id"]

    def is_user(self, identifier: Any) -> bool:
        """True when ``identifier`` is this user's id, name or email."""
        return identifier in (self.user.get("id"), self.user.get("name"), self.user.get("email"))

    def has_group(self, name: str) -> bool:
        return any(group["name"] == name for group in self.groups)

    def has_group_by_id(self, group_id: int) -> bool:
        return any(group["id"] == group_id for group in self.groups)

    def has_permission(self, name: str) -> bool:
        return any(permission["name"] == name for permission in self.permissions)

    def has_permission_by_id(self, permission_id: int) -> bool:
        return any(permission["id"] == permission_id for permission in self.permissions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": dict(self.user),
            "groups": [dict(group) for group in self.groups],
            "permissions": [dict(permission) for permission in self.permissions],
        }
