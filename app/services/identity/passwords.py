"""Salted password hashing."""
import hashlib
import hmac
import secrets
from typing import Optional

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260_000
SALT_BYTES = 16


def hash_password(
    password: str, salt: Optional[str] = None, iterations: Optional[int] = None
) -> str:
    """Hash password with a random salt.

    Returns ``algorithm$iterations$salt$digest`` so the parameters travel with
    the stored value.
    """
    if iterations is None:
        iterations = ITERATIONS
    if salt is None:
        salt = secrets.token_hex(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations
    ).hex()
    return f"{ALGORITHM}${iterations}${salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    """Check password against a stored hash in constant time."""
    try:
        algorithm, iterations, salt, digest = password_hash.split("$", 3)
        iterations = int(iterations)
    except (AttributeError, ValueError):
        return False
    if algorithm != ALGORITHM:
        return False
    candidate = hash_password(password, salt=salt, iterations=iterations)
    return hmac.compare_digest(candidate.rsplit("$", 1)[1], digest)
