# sqlitekit/auth/firewall.py
import json
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from sqlitekit.exceptions import AuthorizationError, ConfigurationError

logger = logging.getLogger(__name__)

WILDCARD = "*"


class Firewall(ABC):
    @abstractmethod
    def emit(self, operation: str, context: Dict[str, Any]) -> Any:
        """Decide whether ``operation`` may run.

        Args:
            operation: Name of the gated operation (e.g. 'select').
            context: Dictionary with 'credentials', 'parameters' and 'facade'.

        Raises:
            AuthorizationError: To deny the operation. Returning allows it.
        """
        pass


class RuleFirewall(Firewall):
    """Allow an operation when the caller holds any group or permission listed
    for it. Operations without a rule fall back to the '*' rule, then to the
    default policy."""

    def __init__(self, rules: Dict[str, Dict[str, List[str]]], default: str = "deny"):
        if default not in ("allow", "deny"):
            raise ConfigurationError(f"Invalid default policy: {default}")
        self.rules = rules
        self.default = default

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'RuleFirewall':
        if not isinstance(data, dict):
            raise ConfigurationError("Firewall rules must be a JSON object")
        rules = data.get("rules", {})
        if not isinstance(rules, dict):
            raise ConfigurationError("Firewall 'rules' must map operation names to rules")
        return RuleFirewall(rules, data.get("default", "deny"))

    def emit(self, operation: str, context: Dict[str, Any]) -> None:
        credentials = context.get("credentials")
        rule = self.rules.get(operation, self.rules.get(WILDCARD))
        if rule is None:
            allowed = self.default == "allow"
        elif credentials is None:
            allowed = False
        else:
            allowed = (
                any(credentials.has_group(name) for name in rule.get("groups", []))
                or any(credentials.has_permission(name) for name in rule.get("permissions", []))
            )
        if not allowed:
            who = credentials.user.get("name") if credentials is not None else "anonymous"
            logger.warning(f"Firewall denied {operation} for {who}")
            raise AuthorizationError(f"Operation {operation} not allowed for user {who}")
        logger.debug(f"Firewall allowed {operation}")


def _read_rules(path: str) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Firewall file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid firewall file {path}: {e}") from e


async def load_firewall(path: Optional[str]) -> Optional[RuleFirewall]:
    """Load a RuleFirewall from a JSON file. No path means no firewall."""
    if not path:
        return None
    data = await asyncio.to_thread(_read_rules, path)
    firewall = RuleFirewall.from_dict(data)
    logger.info(f"Loaded firewall rules from {path} ({len(firewall.rules)} rules, default {firewall.default})")
    return firewall
