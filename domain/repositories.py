from __future__ import annotations

from typing import Any, Optional, Protocol

from .models import Account


class UsernameTakenError(Exception):
    """Raised by `AccountStore.insert` when the name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Account name already taken: {name}")
        self.name = name


class AccountNotFoundError(LookupError):
    """Raised by `AccountStore.update_by_id` for an unknown account ID."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"No account with id {account_id}")
        self.account_id = account_id


class AccountStore(Protocol):
    """
    Persistence abstraction for accounts.

    Implementations are responsible for:
    - Mapping between stored rows and the `Account` domain model.
    - Assigning account IDs on insert.
    - Enforcing name uniqueness at insert time.
    """

    def find_by_name(self, name: str) -> Optional[Account]:
        """Return the account with the given (case-sensitive) name, or None."""

        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        ...

    def insert(self, name: str, credential_hash: str) -> Account:
        """
        Create a new account with a clean throttle state.

        Must raise `UsernameTakenError` instead of creating a duplicate, so
        that two concurrent signups for the same name cannot both succeed.
        """

        ...

    def update_by_id(self, account_id: str, **fields: Any) -> Account:
        """
        Overwrite the given mutable fields in a single write and return the
        updated account.

        Only `failed_attempts`, `last_failed_at` and `locked_until` may be
        updated. Raises `AccountNotFoundError` if the account does not exist.
        """

        ...
