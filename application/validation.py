from __future__ import annotations

import re
from typing import List

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100

_NAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def validate_signup_input(name: str, password: str) -> List[str]:
    """
    Check signup input format. Returns a list of error messages; an empty
    list means the input is valid.
    """

    errors = []

    if len(name) < NAME_MIN_LENGTH:
        errors.append(f"Username must be at least {NAME_MIN_LENGTH} characters")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"Username must be at most {NAME_MAX_LENGTH} characters")
    if name and not _NAME_PATTERN.fullmatch(name):
        errors.append("Username can only contain letters, numbers, and underscores")

    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    elif len(password) > PASSWORD_MAX_LENGTH:
        errors.append(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")

    return errors


def validate_signin_input(name: str, password: str) -> List[str]:
    # Presence only; format rules are enforced at signup.
    errors = []
    if not name:
        errors.append("Username is required")
    if not password:
        errors.append("Password is required")
    return errors
