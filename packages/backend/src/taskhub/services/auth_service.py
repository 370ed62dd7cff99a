"""Authenticator — registration and login.

register: new tenant + its first user (always ADMIN) + a token, in one
transaction. If the user row cannot be written the tenant row is rolled
back with it, so a tenant without users is never visible.

login: read-only credential check + a fresh token. An unknown email and a
wrong password return the very same Failure, and both paths pay for one
bcrypt verification so response timing doesn't tell them apart either.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.identity import Role
from taskhub.auth.jwt import TokenCodec
from taskhub.auth.password import hash_password, verify_password
from taskhub.db.models import Tenant, User
from taskhub.errors import ErrorKind, Failure, Result

logger = structlog.get_logger()

EMAIL_TAKEN = Failure(
    ErrorKind.ALREADY_EXISTS,
    "Email already registered. Please use a different email or login.",
)
INVALID_CREDENTIALS = Failure(ErrorKind.INVALID_CREDENTIALS, "Invalid email or password")


@dataclass(frozen=True, slots=True)
class AuthSession:
    """A user together with a freshly issued token."""

    user: User
    token: str


@lru_cache
def _dummy_hash() -> str:
    # Verified against when the email is unknown, to keep timing uniform.
    return hash_password("taskhub-timing-equalizer")


def warm_login_timing() -> None:
    """Compute the dummy hash up front so the first unknown-email login
    costs one verify, like every other login. Called at app startup.
    """
    _dummy_hash()


class AuthService:
    """Business logic for registration and login."""

    def __init__(self, db: AsyncSession, codec: TokenCodec):
        self.db = db
        self.codec = codec

    async def find_by_email(self, email: str) -> Optional[User]:
        # Emails are opaque: matched exactly, no case folding.
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def email_taken(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    # ─── Register ────────────────────────────────────────

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        organization_name: str,
        now: Optional[datetime] = None,
    ) -> Result[AuthSession]:
        """Bootstrap a tenant with its first ADMIN user and return a token."""
        if await self.email_taken(email):
            return EMAIL_TAKEN

        password_hash = await asyncio.to_thread(hash_password, password)

        try:
            tenant = Tenant(name=organization_name)
            self.db.add(tenant)
            await self.db.flush()  # need tenant.id for the user row

            user = User(
                tenant_id=tenant.id,
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                role=Role.ADMIN.value,
            )
            self.db.add(user)
            await self.db.commit()
        except IntegrityError:
            # The tenant row goes with the rollback either way.
            await self.db.rollback()
            if await self.email_taken(email):
                # Lost a race on the unique email.
                return EMAIL_TAKEN
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info("auth.registered", user_id=str(user.id), tenant_id=str(tenant.id))
        return AuthSession(user=user, token=self._issue(user, now))

    # ─── Login ───────────────────────────────────────────

    async def login(
        self,
        email: str,
        password: str,
        now: Optional[datetime] = None,
    ) -> Result[AuthSession]:
        """Check credentials and issue a token for the user's current role."""
        user = await self.find_by_email(email)

        if user is None:
            await asyncio.to_thread(verify_password, password, _dummy_hash())
            logger.info("auth.login_failed", reason="unknown_email")
            return INVALID_CREDENTIALS

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=str(user.id))
            return INVALID_CREDENTIALS

        logger.info("auth.login", user_id=str(user.id), tenant_id=str(user.tenant_id))
        return AuthSession(user=user, token=self._issue(user, now))

    def _issue(self, user: User, now: Optional[datetime]) -> str:
        return self.codec.issue(
            user_id=user.id,
            email=user.email,
            role=Role(user.role),
            tenant_id=user.tenant_id,
            now=now,
        )
