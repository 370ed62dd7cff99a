"""User management inside the caller's tenant.

Only ADMINs add users or change roles. A role change takes effect at the
user's next login: issued tokens keep the role they were signed with.
"""

import asyncio
import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.guard import authorize, deny
from taskhub.auth.identity import IdentityContext, Role
from taskhub.auth.password import hash_password
from taskhub.db.models import User
from taskhub.errors import ErrorKind, Failure, Result
from taskhub.services.auth_service import EMAIL_TAKEN
from taskhub.services.base import get_scoped

logger = structlog.get_logger()

_ADMIN_ONLY = frozenset({Role.ADMIN})
_ADMIN_REQUIRED = "ADMIN role required"


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_me(self, identity: IdentityContext) -> Result[User]:
        return await get_scoped(self.db, User, identity.user_id, identity, "User")

    async def list_users(self, identity: IdentityContext) -> list[User]:
        result = await self.db.execute(
            select(User)
            .where(User.tenant_id == identity.tenant_id)
            .order_by(User.created_at)
        )
        return list(result.scalars().all())

    async def create_user(
        self,
        identity: IdentityContext,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role = Role.MEMBER,
    ) -> Result[User]:
        """Add a user to the caller's tenant (ADMIN only)."""
        failure = deny(
            authorize(identity, identity.tenant_id, roles=_ADMIN_ONLY),
            "Tenant",
            _ADMIN_REQUIRED,
        )
        if failure:
            return failure

        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.first() is not None:
            return EMAIL_TAKEN

        user = User(
            tenant_id=identity.tenant_id,
            email=email,
            password_hash=await asyncio.to_thread(hash_password, password),
            first_name=first_name,
            last_name=last_name,
            role=Role(role).value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self.db.execute(select(User.id).where(User.email == email))
            if existing.first() is not None:
                return EMAIL_TAKEN
            raise

        logger.info(
            "user.created",
            user_id=str(user.id),
            role=user.role,
            tenant_id=str(identity.tenant_id),
        )
        return user

    async def change_role(
        self,
        identity: IdentityContext,
        user_id: uuid.UUID,
        role: Role,
    ) -> Result[User]:
        """Change a tenant user's role (ADMIN only).

        The last ADMIN of a tenant cannot be demoted.
        """
        user = await get_scoped(
            self.db, User, user_id, identity, "User",
            roles=_ADMIN_ONLY, forbidden_message=_ADMIN_REQUIRED,
        )
        if isinstance(user, Failure):
            return user

        role = Role(role)
        if user.role == Role.ADMIN.value and role is not Role.ADMIN:
            if await self._admin_count(user.tenant_id) <= 1:
                return Failure(
                    ErrorKind.INVALID_INPUT,
                    "A tenant must keep at least one ADMIN",
                )

        user.role = role.value
        await self.db.commit()
        logger.info("user.role_changed", user_id=str(user.id), role=role.value)
        return user

    async def _admin_count(self, tenant_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(User)
            .where(User.tenant_id == tenant_id, User.role == Role.ADMIN.value)
        )
        return result.scalar_one()

