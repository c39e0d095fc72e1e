from __future__ import annotations

from typing import Any, Dict, Protocol


class Crypto(Protocol):
    """
    One-way credential hashing plus bearer-token signing.

    The application layer treats all three operations as opaque; adapters
    decide on the algorithm and its cost.
    """

    def hash(self, plaintext: str) -> str:
        """Return a salted, deliberately slow one-way hash of `plaintext`."""

        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        ...

    def sign(self, claims: Dict[str, Any]) -> str:
        """Return an opaque bearer token carrying `claims`."""

        ...
