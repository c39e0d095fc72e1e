from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class AuthErrorCode(str, Enum):
    """Machine-readable reason attached to every failed auth result."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_LOCKED = "USER_LOCKED"
    USERNAME_EXISTS = "USERNAME_EXISTS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class UserInfo:
    """Public view of an account. Never carries the credential hash."""

    id: str
    name: str


@dataclass
class AuthSuccess:
    message: str
    user: UserInfo
    token: Optional[str] = None
    success: bool = field(default=True, init=False)


@dataclass
class AuthFailure:
    message: str
    code: AuthErrorCode
    success: bool = field(default=False, init=False)


# Business outcomes are returned, not raised; callers branch on `success`.
AuthResult = Union[AuthSuccess, AuthFailure]
