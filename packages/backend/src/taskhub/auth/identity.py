"""Roles and the per-request identity context."""

import uuid
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Closed set of tenant roles. The first user of a tenant is ADMIN."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"


# Roles allowed to run tenant-wide destructive or privileged actions.
MANAGERS = frozenset({Role.ADMIN, Role.MANAGER})


@dataclass(frozen=True, slots=True)
class IdentityContext:
    """Immutable identity resolved from a validated token.

    Built once per request and passed explicitly to every business
    operation. Never persisted, never shared between requests.
    """

    user_id: uuid.UUID
    tenant_id: uuid.UUID
    role: Role
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
