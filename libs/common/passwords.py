"""Password hashing with bcrypt.

Usage:
    from libs.common.passwords import hash_password, verify_password

    password_hash = hash_password("teach123")
    verify_password("teach123", password_hash)  # True
"""

import bcrypt

# Cost factor 10 matches the hashes already stored by the accounts table.
BCRYPT_ROUNDS = 10


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True when ``password`` matches ``password_hash``; malformed hashes never match."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
