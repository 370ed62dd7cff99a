"""User management routes (tenant-scoped, ADMIN-gated writes)."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.errors import raise_for_failure
from taskhub.auth.dependencies import get_current_identity
from taskhub.auth.identity import IdentityContext
from taskhub.db.engine import get_db
from taskhub.schemas.auth import RoleChange, UserCreate, UserRead
from taskhub.services.user_service import UserService

router = APIRouter(prefix="/users")


def _user_svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=list[UserRead])
async def list_users(
    identity: IdentityContext = Depends(get_current_identity),
    svc: UserService = Depends(_user_svc),
):
    """List users of the caller's organization."""
    return await svc.list_users(identity)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    identity: IdentityContext = Depends(get_current_identity),
    svc: UserService = Depends(_user_svc),
):
    """Add a user to the caller's organization. ADMIN only."""
    return raise_for_failure(
        await svc.create_user(
            identity,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            role=body.role,
        )
    )


@router.put("/{user_id}/role", response_model=UserRead)
async def change_role(
    user_id: uuid.UUID,
    body: RoleChange,
    identity: IdentityContext = Depends(get_current_identity),
    svc: UserService = Depends(_user_svc),
):
    """Change a user's role. ADMIN only; applies from the user's next login."""
    return raise_for_failure(await svc.change_role(identity, user_id, body.role))
