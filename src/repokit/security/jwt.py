"""JWT issuance and validation over PyJWT.

Tokens are signed with the ``[jwt]`` secret and always carry ``iss``,
``aud``, ``iat``, ``exp`` and a random ``jti``. Validation never raises for a
bad token; the rejection reason comes back as a :class:`TokenErrorCode` on a
failed :class:`OperationResult`.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt
import structlog
from pydantic import BaseModel, ConfigDict

from repokit.domain.codes import TokenErrorCode as Code
from repokit.services.result import OperationResult

if TYPE_CHECKING:
    from repokit.config.models import JwtConfig

logger = structlog.get_logger(__name__)

TOKEN_TYPE = "Bearer"
ROLE_CLAIM = "role"

# Most specific first: every PyJWT error below subclasses InvalidTokenError.
_REJECTIONS: tuple[tuple[type[jwt.InvalidTokenError], Code, str], ...] = (
    (jwt.ExpiredSignatureError, Code.TOKEN_EXPIRED, "Token has expired."),
    (jwt.InvalidIssuerError, Code.TOKEN_INVALID_ISSUER, "Token issuer is not accepted."),
    (jwt.InvalidAudienceError, Code.TOKEN_INVALID_AUDIENCE, "Token audience is not accepted."),
    (jwt.InvalidSignatureError, Code.TOKEN_INVALID_SIGNATURE, "Token signature is invalid."),
    (jwt.InvalidTokenError, Code.TOKEN_INVALID, "Token is invalid."),
)


class JwtTokenResponse(BaseModel):
    """An issued token and when it stops being accepted."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str = TOKEN_TYPE
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        """Whole seconds until expiry, never negative."""
        remaining = (self.expires_at - datetime.now(UTC)).total_seconds()
        return max(0, int(remaining))


def _signing_key(settings: JwtConfig) -> str:
    if settings.secret_key is None or settings.issuer is None or settings.audience is None:
        raise ValueError("JWT settings need secret_key, issuer and audience")
    return settings.secret_key.get_secret_value()


def create_token(
    claims: Mapping[str, Any],
    settings: JwtConfig,
    *,
    now: datetime | None = None,
) -> JwtTokenResponse:
    """Sign *claims* into a token that expires ``expiry_minutes`` after *now*.

    Registered claims from *settings* (``iss``, ``aud``, ``exp``, ``iat``)
    override any in *claims*; a ``jti`` is generated unless one is given.

    Raises:
        ValueError: The secret key, issuer or audience is not configured.
    """
    key = _signing_key(settings)
    issued_at = now or datetime.now(UTC)
    expires_at = issued_at + timedelta(minutes=settings.expiry_minutes)

    payload = dict(claims)
    payload.setdefault("jti", uuid.uuid4().hex)
    payload.update(
        iss=settings.issuer,
        aud=settings.audience,
        iat=issued_at,
        exp=expires_at,
    )
    token = jwt.encode(payload, key, algorithm=settings.algorithm)
    logger.debug("Issued token", jti=payload["jti"], sub=payload.get("sub"))
    return JwtTokenResponse(access_token=token, expires_at=expires_at)


def create_user_token(
    user_id: str,
    email: str,
    role: str,
    settings: JwtConfig,
    *,
    now: datetime | None = None,
) -> JwtTokenResponse:
    """Issue a token for one user: ``sub``, ``unique_name`` and ``role`` claims."""
    return create_token(
        {"sub": user_id, "unique_name": email, ROLE_CLAIM: role}, settings, now=now
    )


def validate_token(
    token: str,
    settings: JwtConfig,
    *,
    leeway: float = 0,
) -> OperationResult[dict[str, Any]]:
    """Verify signature, expiry, issuer and audience; return the claims.

    Raises:
        ValueError: The secret key, issuer or audience is not configured.
    """
    key = _signing_key(settings)
    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=[settings.algorithm],
            audience=settings.audience,
            issuer=settings.issuer,
            leeway=leeway,
            options={"require": ["exp", "iss", "aud"]},
        )
    except jwt.InvalidTokenError as exc:
        for error_type, code, message in _REJECTIONS:
            if isinstance(exc, error_type):
                logger.debug("Token rejected", code=code, reason=str(exc))
                return OperationResult.failure(message, code, exception=exc)
        raise
    return OperationResult.success(claims)


def token_details(token: str) -> JwtTokenResponse:
    """Read the expiry of *token* without verifying it.

    Raises:
        ValueError: *token* is not a decodable JWT or has no ``exp`` claim.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.DecodeError as exc:
        raise ValueError("Invalid token") from exc
    if "exp" not in claims:
        raise ValueError("Token has no exp claim")
    expires_at = datetime.fromtimestamp(claims["exp"], UTC)
    return JwtTokenResponse(access_token=token, expires_at=expires_at)
