"""Error kinds and the Failure value returned by the auth core and services.

Expected outcomes (duplicate email, wrong password, foreign tenant, missing
role) are returned as a Failure instead of raised, so every caller decides
what to do with them at the call site. Exceptions are kept for conditions
that really are exceptional (bad configuration, broken tokens inside the
codec).
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar, Union


class ErrorKind(str, Enum):
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_INPUT = "invalid_input"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True)
class Failure:
    """A classified, caller-safe failure."""

    kind: ErrorKind
    message: str

    @classmethod
    def not_found(cls, resource: str) -> "Failure":
        return cls(ErrorKind.NOT_FOUND, f"{resource} not found")

    @classmethod
    def forbidden(cls, message: str = "Access denied") -> "Failure":
        return cls(ErrorKind.FORBIDDEN, message)


T = TypeVar("T")

# Union return type used by services: either the value or a Failure.
Result = Union[T, Failure]


class TaskHubError(Exception):
    """Base exception for all TaskHub errors."""


class ConfigError(TaskHubError):
    """Raised when configuration is invalid."""


class TokenError(TaskHubError):
    """Raised when a token fails signature, shape, or expiry checks."""
