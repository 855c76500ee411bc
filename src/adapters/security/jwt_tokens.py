"""
JWT session tokens - Implements SessionTokens protocol.

Tokens carry only the account id (``sub``) and an expiry. They say nothing
about account status; the authorization gate looks that up per request.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt

logger = logging.getLogger(__name__)


class JwtSessionTokens:
    """Implements SessionTokens protocol via PyJWT (HMAC-signed)."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, account_id: int) -> str:
        now = datetime.now(timezone.utc)
        # PyJWT expects "sub" to be a string
        payload = {"sub": str(account_id), "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> int | None:
        try:
            payload = jwt.decode(
                token.strip(),
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Session token expired")
            return None
        except jwt.PyJWTError as e:
            logger.debug("Session token rejected: %s", e)
            return None

        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            return None
