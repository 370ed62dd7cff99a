"""JWT token issuance and validation.

Tokens are stateless: the codec keeps no per-token record, so validity is
decided only by the HMAC signature and the expiry claim. There is no
revocation list. Each token carries the identity a request needs:

    {"sub": email, "userId", "email", "role", "tenantId", "iat", "exp"}

Timestamps are JWT NumericDates (whole seconds). Expiry is strict:
a token is valid while now < exp, with no leeway for clock skew. A naive
`now` is read as UTC on both sides.
"""

import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from taskhub.auth.identity import IdentityContext, Role
from taskhub.config import MIN_SECRET_BYTES, settings
from taskhub.errors import ConfigError, TokenError

_REQUIRED_CLAIMS = ["exp", "iat", "userId", "email", "role", "tenantId"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(now: Optional[datetime]) -> datetime:
    """The instant to use for issue/validate; naive datetimes are read as UTC."""
    if now is None:
        return utcnow()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


class TokenClaims(BaseModel):
    """Verified identity claims of a token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: uuid.UUID = Field(alias="userId")
    email: str
    role: Role
    tenant_id: uuid.UUID = Field(alias="tenantId")
    issued_at: int = Field(alias="iat")
    expires_at: int = Field(alias="exp")

    def to_identity(self) -> IdentityContext:
        return IdentityContext(
            user_id=self.user_id,
            tenant_id=self.tenant_id,
            role=self.role,
            email=self.email,
        )


class TokenCodec:
    """Issue and validate HMAC-signed identity tokens.

    The secret is checked once, here; a key shorter than the digest size
    is refused instead of being silently accepted.
    """

    def __init__(
        self,
        secret: str,
        lifetime: timedelta,
        algorithm: str = "HS256",
    ):
        if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigError(
                f"Signing secret must be at least {MIN_SECRET_BYTES} bytes"
            )
        if lifetime <= timedelta(0):
            raise ConfigError("Token lifetime must be positive")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    def issue(
        self,
        user_id: uuid.UUID,
        email: str,
        role: Role,
        tenant_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> str:
        """Create a signed token valid from now until now + lifetime."""
        issued_at = as_utc(now)
        payload = {
            "sub": email,
            "userId": str(user_id),
            "email": email,
            "role": Role(role).value,
            "tenantId": str(tenant_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def validate(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        """Verify signature first, then claim shape, then expiry.

        Raises TokenError on any failure. Nothing from the payload is
        trusted before the signature checks out.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against the injected clock.
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}") from e

        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise TokenError("Invalid token: malformed claims") from e

        current = as_utc(now).timestamp()
        if current >= claims.expires_at:
            raise TokenError("Token has expired")
        return claims


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec built from settings (FastAPI dependency)."""
    return TokenCodec(
        secret=settings.jwt_secret,
        lifetime=timedelta(minutes=settings.access_token_expire_minutes),
        algorithm=settings.jwt_algorithm,
    )
