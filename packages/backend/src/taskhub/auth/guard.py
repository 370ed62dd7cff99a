"""Authorization guard — pure ALLOW/DENY decisions, no I/O.

Every resource operation loads its target and then asks the guard. The
order is fixed: tenant scope first, unconditionally; role and ownership
rules only once the resource is known to live in the caller's tenant.

A tenant mismatch is reported as NOT_FOUND, never FORBIDDEN, so a caller
cannot learn that an id exists in some other organization. FORBIDDEN is
only ever returned for resources inside the caller's own tenant.
"""

import uuid
from enum import Enum
from typing import Iterable, Optional

from taskhub.auth.identity import IdentityContext, Role
from taskhub.errors import ErrorKind, Failure


class Decision(str, Enum):
    ALLOW = "allow"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


def same_tenant(identity: IdentityContext, resource_tenant_id: uuid.UUID) -> bool:
    return identity.tenant_id == resource_tenant_id


def has_any_role(identity: IdentityContext, allowed_roles: Iterable[Role]) -> bool:
    return identity.role in frozenset(allowed_roles)


def is_owner_or_admin(identity: IdentityContext, owner_id: Optional[uuid.UUID]) -> bool:
    """The resource's owner, or any ADMIN of the tenant."""
    return identity.is_admin or (owner_id is not None and identity.user_id == owner_id)


def authorize(
    identity: IdentityContext,
    resource_tenant_id: uuid.UUID,
    *,
    roles: Optional[Iterable[Role]] = None,
    owner_id: Optional[uuid.UUID] = None,
    owner_check: bool = False,
) -> Decision:
    """Decide access to one resource.

    roles       → caller must hold one of these roles
    owner_check → caller must own the resource (owner_id) or be ADMIN

    When both are given, both must pass.
    """
    if not same_tenant(identity, resource_tenant_id):
        return Decision.NOT_FOUND

    if roles is not None and not has_any_role(identity, roles):
        return Decision.FORBIDDEN
    if owner_check and not is_owner_or_admin(identity, owner_id):
        return Decision.FORBIDDEN
    return Decision.ALLOW


def deny(decision: Decision, resource: str, forbidden_message: str = "Access denied") -> Optional[Failure]:
    """Map a Decision to the Failure a service returns (None when allowed).

    The not-found message is the same one used for ids that do not exist
    at all, so the two cases cannot be told apart.
    """
    if decision is Decision.ALLOW:
        return None
    if decision is Decision.NOT_FOUND:
        return Failure.not_found(resource)
    return Failure(ErrorKind.FORBIDDEN, forbidden_message)
