"""PBKDF2 password hashing.

Encoded form: ``<base64 salt>.<base64 derived key>``. The salt is 16 random
bytes and the derived key is 32 bytes of PBKDF2-HMAC-SHA256.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import secrets

DEFAULT_ITERATIONS = 100_000
SALT_BYTES = 16
KEY_BYTES = 32
_ALGORITHM = "sha256"


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac(
        _ALGORITHM, password.encode("utf-8"), salt, iterations, dklen=KEY_BYTES
    )


def hash_password(password: str, *, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Hash *password* with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    key = _derive(password, salt, iterations)
    return f"{base64.b64encode(salt).decode('ascii')}.{base64.b64encode(key).decode('ascii')}"


def verify_password(
    hashed_password: str,
    provided_password: str,
    *,
    iterations: int = DEFAULT_ITERATIONS,
) -> bool:
    """Check *provided_password* against an encoded hash.

    Malformed hashes never match.
    """
    parts = hashed_password.split(".")
    if len(parts) != 2:
        return False
    try:
        salt = base64.b64decode(parts[0], validate=True)
        expected = base64.b64decode(parts[1], validate=True)
    except (binascii.Error, ValueError):
        return False
    return hmac.compare_digest(expected, _derive(provided_password, salt, iterations))
