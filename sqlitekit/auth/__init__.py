from .credentials import Credentials
from .firewall import Firewall, RuleFirewall, load_firewall
from .manager import AuthCrud, AuthorizedOperations

__all__ = [
    "AuthCrud",
    "AuthorizedOperations",
    "Credentials",
    "Firewall",
    "RuleFirewall",
    "load_firewall",
]
