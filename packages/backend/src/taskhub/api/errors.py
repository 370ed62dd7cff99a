"""Translate service Failures into HTTP errors.

Handlers call raise_for_failure() on every service result themselves;
there is no global handler guessing status codes from exception types.
"""

from typing import NoReturn, TypeVar, Union

from fastapi import HTTPException

from taskhub.errors import ErrorKind, Failure

T = TypeVar("T")

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_INPUT: 422,
    ErrorKind.INTERNAL: 500,
}


def http_error(failure: Failure) -> HTTPException:
    status = STATUS_BY_KIND[failure.kind]
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    detail = "Internal server error" if status == 500 else failure.message
    return HTTPException(status_code=status, detail=detail, headers=headers)


def raise_for_failure(result: Union[T, Failure]) -> T:
    """Return the value, or raise the HTTP error for a Failure."""
    if isinstance(result, Failure):
        raise http_error(result)
    return result


def fail(failure: Failure) -> NoReturn:
    raise http_error(failure)
