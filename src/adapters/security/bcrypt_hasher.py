"""
bcrypt password hasher - Implements PasswordHasher protocol.
"""

from functools import lru_cache

import bcrypt

_DUMMY_PASSWORD = b"dummy_password_for_timing_safety"


@lru_cache
def _dummy_bcrypt_hash(rounds: int) -> str:
    # One per cost factor per process, so unknown-email logins pay a single checkpw
    return bcrypt.hashpw(_DUMMY_PASSWORD, bcrypt.gensalt(rounds=rounds)).decode()


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Each hash gets its own salt. bcrypt only looks at the first 72 bytes
    of the password, so longer inputs are truncated explicitly.
    """

    def __init__(self, rounds: int = 10) -> None:
        if rounds < 10:
            raise ValueError("bcrypt cost factor must be at least 10")
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(self._encode(password), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode())
        except ValueError:
            # Malformed stored hash
            return False

    def dummy_hash(self) -> str:
        """A hash at this cost factor that no real password is checked against."""
        return _dummy_bcrypt_hash(self._rounds)

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:72]
