# sqlitekit/auth/passwords.py
import bcrypt


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, stored: str, hashed: bool = True) -> bool:
    """Check ``password`` against the stored value.

    With ``hashed=False`` the stored value is compared as plaintext, for
    databases written before hashing was enabled.
    """
    if stored is None:
        return False
    if not hashed:
        return password == stored
    try:
        return bcrypt.checkpw(password.encode('utf-8'), stored.encode('utf-8'))
    except ValueError:
        # stored value is not a bcrypt hash
        return False
