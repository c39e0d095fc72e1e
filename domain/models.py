from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Account:
    """
    Authentication identity with a unique name and a hashed credential.

    The throttle fields (`failed_attempts`, `last_failed_at`, `locked_until`)
    live on the account itself so that lockout state is shared by every
    process talking to the same store. Timestamps are timezone-aware UTC.
    """

    id: str
    name: str
    credential_hash: str
    failed_attempts: int = 0
    last_failed_at: Optional[datetime] = None
    locked_until: Optional[datetime] = None


@dataclass
class LockStatus:
    """Whether an account is locked at a given instant."""

    locked: bool
    remaining_minutes: int = 0
