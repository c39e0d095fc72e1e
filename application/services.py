from __future__ import annotations

import logging

from application.authenticator import Authenticator
from application.results import AuthErrorCode, AuthFailure, AuthResult
from application.validation import validate_signin_input, validate_signup_input

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong. Please try again later."


def request_signup(name: str, password: str, authenticator: Authenticator) -> AuthResult:
    """
    Handle a signup request from any channel.

    - Malformed input is rejected with `VALIDATION_ERROR` before the
      authenticator is called.
    - Store or crypto faults are logged and reported as `INTERNAL_ERROR`.
    """

    errors = validate_signup_input(name, password)
    if errors:
        return AuthFailure(message=errors[0], code=AuthErrorCode.VALIDATION_ERROR)

    try:
        return authenticator.signup(name, password)
    except Exception:
        logger.exception("Signup failed unexpectedly for name=%s", name)
        return AuthFailure(message=INTERNAL_ERROR_MESSAGE, code=AuthErrorCode.INTERNAL_ERROR)


def request_signin(name: str, password: str, authenticator: Authenticator) -> AuthResult:
    """Handle a signin request from any channel. Same error mapping as signup."""

    errors = validate_signin_input(name, password)
    if errors:
        return AuthFailure(message=errors[0], code=AuthErrorCode.VALIDATION_ERROR)

    try:
        return authenticator.signin(name, password)
    except Exception:
        logger.exception("Signin failed unexpectedly for name=%s", name)
        return AuthFailure(message=INTERNAL_ERROR_MESSAGE, code=AuthErrorCode.INTERNAL_ERROR)
