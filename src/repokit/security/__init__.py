"""Password hashing and JWT helpers."""

from repokit.security.jwt import (
    JwtTokenResponse,
    create_token,
    create_user_token,
    token_details,
    validate_token,
)
from repokit.security.password import hash_password, verify_password

__all__ = [
    "JwtTokenResponse",
    "create_token",
    "create_user_token",
    "hash_password",
    "token_details",
    "validate_token",
    "verify_password",
]
