"""Shared loading helper: fetch by id, then run the authorization guard."""

import uuid
from typing import Iterable, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.auth.guard import authorize, deny
from taskhub.auth.identity import IdentityContext, Role
from taskhub.errors import Failure, Result

M = TypeVar("M")


async def get_scoped(
    db: AsyncSession,
    model: Type[M],
    resource_id: uuid.UUID,
    identity: IdentityContext,
    resource_name: str,
    *,
    roles: Optional[Iterable[Role]] = None,
    owner_attr: Optional[str] = None,
    forbidden_message: str = "Access denied",
) -> Result[M]:
    """Load one tenant-scoped row and authorize the caller against it.

    Missing rows and rows of another tenant produce the same Failure.
    owner_attr names the column holding the owner id when the action is
    owner-gated (owner or ADMIN).
    """
    obj = await db.get(model, resource_id)
    if obj is None:
        return Failure.not_found(resource_name)

    decision = authorize(
        identity,
        obj.tenant_id,
        roles=roles,
        owner_id=getattr(obj, owner_attr) if owner_attr else None,
        owner_check=owner_attr is not None,
    )
    failure = deny(decision, resource_name, forbidden_message)
    return failure or obj
