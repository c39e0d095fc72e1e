from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from domain.crypto import Crypto

# bcrypt only looks at the first 72 bytes of its input.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptJwtCrypto(Crypto):
    """
    `Crypto` adapter using bcrypt for credentials and HS256 JWTs for tokens.

    Tokens carry the caller's claims plus `iat` and `exp`.
    """

    def __init__(
        self,
        secret: str,
        rounds: int = 10,
        expires_minutes: int = 24 * 60,
        algorithm: str = "HS256",
    ) -> None:
        self._secret = secret
        self._rounds = rounds
        self._expires = timedelta(minutes=expires_minutes)
        self._algorithm = algorithm

    def hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        return bcrypt.checkpw(_encode(plaintext), hashed.encode("utf-8"))

    def sign(self, claims: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + self._expires
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode and validate a token. Raises `jwt.InvalidTokenError` on failure."""

        return jwt.decode(token, self._secret, algorithms=[self._algorithm])
