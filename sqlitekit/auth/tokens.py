# sqlitekit/auth/tokens.py
import secrets

TOKEN_ALPHABET = "abcdefghijklmnoprstuvwxyz"
TOKEN_LENGTH = 100


def generate_token(length: int = TOKEN_LENGTH, alphabet: str = TOKEN_ALPHABET) -> str:
    """Draw ``length`` characters uniformly from ``alphabet``."""
    if length <= 0:
        raise ValueError(f"Token length must be positive, got {length}")
    return "".join(secrets.choice(alphabet) for _ in range(length))
