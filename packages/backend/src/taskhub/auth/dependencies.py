"""Request identity resolution + FastAPI auth dependencies.

Per request:
1. Skip entirely when the path is on the public allow-list.
2. Extract the bearer token from the Authorization header.
3. Validate it with the TokenCodec.
4. Build the IdentityContext and keep it on request.state for this
   request only.

Any failure in 2–3 is UNAUTHENTICATED; there is no fallback mechanism.
"""

from datetime import datetime
from typing import Iterable, Optional, Union

import structlog
from fastapi import Depends, Header, HTTPException, Request

from taskhub.auth.identity import IdentityContext
from taskhub.auth.jwt import TokenCodec, get_token_codec
from taskhub.config import settings
from taskhub.errors import ErrorKind, Failure, TokenError

logger = structlog.get_logger()

_UNAUTHENTICATED_HEADERS = {"WWW-Authenticate": "Bearer"}


class IdentityResolver:
    """Turns a raw Authorization header into an IdentityContext."""

    def __init__(self, codec: TokenCodec, public_paths: Iterable[str]):
        self.codec = codec
        self.public_paths = frozenset(p.rstrip("/") or "/" for p in public_paths)

    def is_public(self, path: str) -> bool:
        return (path.rstrip("/") or "/") in self.public_paths

    def resolve(
        self,
        authorization: Optional[str],
        now: Optional[datetime] = None,
    ) -> Union[IdentityContext, Failure]:
        token = extract_bearer_token(authorization)
        if token is None:
            return Failure(ErrorKind.UNAUTHENTICATED, "Authentication required")

        try:
            claims = self.codec.validate(token, now=now)
        except TokenError as e:
            logger.info("auth.token_rejected", reason=str(e))
            return Failure(ErrorKind.UNAUTHENTICATED, "Invalid or expired token")

        return claims.to_identity()


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from "Bearer <token>", or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def get_identity_resolver(
    codec: TokenCodec = Depends(get_token_codec),
) -> IdentityResolver:
    return IdentityResolver(codec, settings.public_paths)


async def authenticate_request(
    request: Request,
    authorization: Optional[str] = Header(None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Optional[IdentityContext]:
    """Router-level dependency: resolve identity unless the path is public.

    FastAPI caches this per request, so handlers that also depend on
    get_current_identity don't validate the token twice.
    """
    if resolver.is_public(request.url.path):
        return None

    result = resolver.resolve(authorization)
    if isinstance(result, Failure):
        raise HTTPException(
            status_code=401,
            detail=result.message,
            headers=_UNAUTHENTICATED_HEADERS,
        )

    request.state.identity = result
    structlog.contextvars.bind_contextvars(
        user_id=str(result.user_id), tenant_id=str(result.tenant_id)
    )
    return result


async def get_current_identity(
    identity: Optional[IdentityContext] = Depends(authenticate_request),
) -> IdentityContext:
    """Handler dependency: the caller's IdentityContext (401 if none)."""
    if identity is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers=_UNAUTHENTICATED_HEADERS,
        )
    return identity
