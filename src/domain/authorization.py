"""
Authorization gate - per-request session re-validation.

A signed session token only proves who the caller was when it was issued.
The gate resolves the bound account from the store on every request, so a
block or delete takes effect on the caller's very next request rather than
when the token expires.
"""

import logging
from dataclasses import dataclass

from .exceptions import AccountRevoked, AuthenticationRequired, SessionInvalid
from .ports import Account, AccountRepository, AccountStatus, SessionTokens

logger = logging.getLogger(__name__)


@dataclass
class AuthorizationGate:
    """Admit or reject a protected request based on live account state."""

    repository: AccountRepository
    tokens: SessionTokens

    def authorize(self, credential: str | None) -> Account:
        """
        Resolve the acting account for a session credential.

        Args:
            credential: Raw session token, or None if the request carried none

        Returns:
            Live account snapshot (UNVERIFIED or ACTIVE)

        Raises:
            AuthenticationRequired: No credential presented
            SessionInvalid: Bad signature, expired or malformed credential
            AccountRevoked: Account deleted or blocked since issuance
        """
        if not credential:
            raise AuthenticationRequired()

        account_id = self.tokens.verify(credential)
        if account_id is None:
            raise SessionInvalid()

        account = self.repository.find_by_id(account_id)
        if account is None:
            logger.info("Rejected session for deleted account id=%s", account_id)
            raise AccountRevoked("Account has been deleted")

        if account.status is AccountStatus.BLOCKED:
            logger.info("Rejected session for blocked account id=%s", account_id)
            raise AccountRevoked("Account is blocked")

        return account
