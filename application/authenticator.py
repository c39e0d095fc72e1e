from __future__ import annotations

import logging
import secrets
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Callable, Optional

from application.results import AuthErrorCode, AuthFailure, AuthResult, AuthSuccess, UserInfo
from domain.crypto import Crypto
from domain.models import Account
from domain.repositories import AccountStore, UsernameTakenError
from domain.throttle import ThrottlePolicy, cleared_state, lock_status, record_failure

logger = logging.getLogger(__name__)

SIGNUP_OK = "User created successfully"
USERNAME_EXISTS = "Username already exists"
SIGNIN_OK = "Login successful"
INVALID_CREDENTIALS = "Invalid username or password"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Authenticator:
    """
    Signup and signin decisions, including per-account lockout.

    All throttle state lives on the account in the store, so any number of
    processes can share one store. The failed-attempt update is a plain
    read-then-write: two concurrent wrong passwords for the same account
    may count as one (last write wins).
    """

    def __init__(
        self,
        store: AccountStore,
        crypto: Crypto,
        policy: Optional[ThrottlePolicy] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._crypto = crypto
        self._policy = policy or ThrottlePolicy()
        self._clock = clock
        self._dummy_hash: Optional[str] = None

    def signup(self, name: str, password: str) -> AuthResult:
        """
        Register a new account.

        Input format is assumed to be validated already. No token is issued.
        """

        if self._store.find_by_name(name) is not None:
            return AuthFailure(message=USERNAME_EXISTS, code=AuthErrorCode.USERNAME_EXISTS)

        credential_hash = self._crypto.hash(password)
        try:
            account = self._store.insert(name, credential_hash)
        except UsernameTakenError:
            # Lost the race against a concurrent signup for the same name.
            return AuthFailure(message=USERNAME_EXISTS, code=AuthErrorCode.USERNAME_EXISTS)

        logger.info("Account created: id=%s name=%s", account.id, account.name)
        return AuthSuccess(message=SIGNUP_OK, user=UserInfo(id=account.id, name=account.name))

    def signin(self, name: str, password: str) -> AuthResult:
        """
        Authenticate and issue a bearer token.

        Unknown names and wrong passwords produce the same failure. A locked
        account is rejected before the password is checked and the attempt
        is not counted.
        """

        account = self._store.find_by_name(name)
        if account is None:
            self._crypto.verify(password, self._get_dummy_hash())
            return self._invalid_credentials()

        now = self._clock()
        status = lock_status(account, now)
        if status.locked:
            return AuthFailure(
                message=f"Account is locked. Try again in {status.remaining_minutes} minute(s).",
                code=AuthErrorCode.USER_LOCKED,
            )

        if not self._crypto.verify(password, account.credential_hash):
            return self._reject_password(account, now)

        self._store.update_by_id(account.id, **asdict(cleared_state()))
        token = self._crypto.sign({"sub": account.id, "name": account.name})

        logger.info("Signin succeeded: id=%s", account.id)
        return AuthSuccess(
            message=SIGNIN_OK,
            user=UserInfo(id=account.id, name=account.name),
            token=token,
        )

    def _reject_password(self, account: Account, now: datetime) -> AuthResult:
        state = record_failure(account, now, self._policy)
        self._store.update_by_id(account.id, **asdict(state))
        logger.info("Signin failed: id=%s", account.id)

        refreshed = self._store.get_by_id(account.id)
        if refreshed is not None and lock_status(refreshed, now).locked:
            logger.warning("Account locked: id=%s until=%s", account.id, refreshed.locked_until)
            return AuthFailure(
                message=(
                    "Account locked due to too many failed attempts. "
                    f"Try again in {self._policy.window_minutes} minutes."
                ),
                code=AuthErrorCode.USER_LOCKED,
            )

        return self._invalid_credentials()

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._crypto.hash(secrets.token_urlsafe(16))
        return self._dummy_hash

    @staticmethod
    def _invalid_credentials() -> AuthFailure:
        return AuthFailure(message=INVALID_CREDENTIALS, code=AuthErrorCode.INVALID_CREDENTIALS)
