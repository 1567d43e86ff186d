"""
Typed outcomes for core operations.

Every mutating or lookup operation in the core returns either ``Ok(value)`` or
``Err(kind, message)`` instead of raising. Callers that prefer exceptions can
call ``unwrap()``, which raises ``SocialError`` for an ``Err``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_STATE = "invalid_state"
    UNAUTHENTICATED = "unauthenticated"


class SocialError(Exception):
    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        raise SocialError(self.kind, self.message)


Result = Union[Ok[T], Err]


def not_found(message: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, message)


def invalid_argument(message: str) -> Err:
    return Err(ErrorKind.INVALID_ARGUMENT, message)


def invalid_state(message: str) -> Err:
    return Err(ErrorKind.INVALID_STATE, message)


def unauthenticated(message: str) -> Err:
    return Err(ErrorKind.UNAUTHENTICATED, message)
