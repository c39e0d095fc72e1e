"""
Failed-signin throttling rules.

Everything here is a pure function of an `Account` and an explicit `now`;
persisting the outcome is the caller's job.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from .models import Account, LockStatus


@dataclass(frozen=True)
class ThrottlePolicy:
    """How many failures lock an account, and for how long."""

    max_attempts: int = 3
    window: timedelta = field(default_factory=lambda: timedelta(minutes=5))

    @property
    def window_minutes(self) -> int:
        return math.ceil(self.window.total_seconds() / 60)


@dataclass(frozen=True)
class ThrottleState:
    """The throttle fields of an account, as written back to the store."""

    failed_attempts: int
    last_failed_at: Optional[datetime]
    locked_until: Optional[datetime]


def lock_status(account: Account, now: datetime) -> LockStatus:
    """
    Report whether `account` is locked at `now`.

    An expired `locked_until` counts as unlocked; the stale value stays on
    the account until the next write overwrites it.
    """

    if account.locked_until is None or account.locked_until <= now:
        return LockStatus(locked=False)

    remaining = (account.locked_until - now).total_seconds()
    return LockStatus(locked=True, remaining_minutes=math.ceil(remaining / 60))


def record_failure(
    account: Account,
    now: datetime,
    policy: ThrottlePolicy,
) -> ThrottleState:
    """
    Compute the throttle state after one more failed signin at `now`.

    The window rolls from the previous failure: a failure more than
    `policy.window` after the last one starts the count again at 1.
    """

    window_start = now - policy.window
    if account.last_failed_at is not None and account.last_failed_at > window_start:
        failed_attempts = account.failed_attempts + 1
    else:
        failed_attempts = 1

    locked_until = None
    if failed_attempts >= policy.max_attempts:
        locked_until = now + policy.window

    return ThrottleState(
        failed_attempts=failed_attempts,
        last_failed_at=now,
        locked_until=locked_until,
    )


def cleared_state() -> ThrottleState:
    """Throttle state after a successful signin."""

    return ThrottleState(failed_attempts=0, last_failed_at=None, locked_until=None)
