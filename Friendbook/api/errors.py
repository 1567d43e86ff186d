from __future__ import annotations

from typing import Dict, TypeVar

from fastapi import HTTPException, status

from ..core.results import ErrorKind, Result

T = TypeVar("T")

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
}


class AuthError(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(status_code=status_code, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def unwrap(result: Result[T]) -> T:
    """Return the value of an ``Ok`` or raise the matching ``HTTPException``."""
    if result.ok:
        return result.value
    if result.kind == ErrorKind.UNAUTHENTICATED:
        raise AuthError(result.message)
    raise HTTPException(status_code=STATUS_BY_KIND[result.kind], detail=result.message)

