"""
Account lifecycle service - trust state machine implementation.

This module contains the core business logic for account management:
registration, verification redemption, login gating and the
administrative bulk operations.

Account State Machine
=====================

States:
- UNVERIFIED: Initial state after registration
- ACTIVE: Email ownership proven, or unblocked by an administrator
- BLOCKED: Administrator-imposed; refused at login and at the gate

Transitions:
    (none)     -> UNVERIFIED  register()
    UNVERIFIED -> ACTIVE      verify(token)
    any        -> BLOCKED     block_accounts()
    any        -> ACTIVE      unblock_accounts()
    any        -> (deleted)   delete_accounts(), purge_unverified()

Verification never changes an ACTIVE or BLOCKED account. Every bulk
operation is a single set-based statement in the repository, so it either
applies to all matching rows or to none.
"""

import logging
import secrets
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from .exceptions import (
    AccountBlocked,
    EmailAlreadyInUse,
    InvalidCredentials,
    ValidationFailed,
)
from .ports import (
    Account,
    AccountRepository,
    AccountStatus,
    BulkResult,
    EmailSender,
    LoginResult,
    PasswordHasher,
    PurgeResult,
    SessionTokens,
    VerifyResult,
)

logger = logging.getLogger(__name__)


def generate_verification_token() -> str:
    """Unguessable single-use token for the verification link."""
    return secrets.token_urlsafe(32)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AccountService:
    """
    Domain service for the account lifecycle.

    Stateless: every call reads and writes through the repository, and the
    acting account is passed in explicitly by the caller.
    """

    repository: AccountRepository
    hasher: PasswordHasher
    tokens: SessionTokens
    email_sender: EmailSender
    token_factory: Callable[[], str] = generate_verification_token
    clock: Callable[[], datetime] = _utcnow

    def register(self, name: str, email: str, password: str) -> Account:
        """
        Register a new UNVERIFIED account and send its verification link.

        Args:
            name: Display name
            email: Email address (will be normalized)
            password: Plaintext password (will be hashed)

        Returns:
            The created account

        Raises:
            ValidationFailed: If any field is empty
            EmailAlreadyInUse: If the store rejects the email as a duplicate
        """
        name = (name or "").strip()
        normalized_email = self._normalize_email(email or "")
        if not name or not normalized_email or not password:
            raise ValidationFailed("Name, email and password are required")

        password_hash = self.hasher.hash(password)
        verification_token = self.token_factory()

        account = self.repository.insert(name, normalized_email, password_hash, verification_token)
        if account is None:
            raise EmailAlreadyInUse(normalized_email)

        logger.info("Registered account id=%s", account.id)
        self._notify(normalized_email, verification_token)
        return account

    def verify(self, token: str) -> VerifyResult:
        """
        Redeem a verification token.

        Only an UNVERIFIED account is activated. ACTIVE accounts are a no-op
        and BLOCKED accounts stay blocked; in both cases the stored token is
        left as it is.
        """
        if not token:
            return VerifyResult.NOT_FOUND

        account = self.repository.find_by_verification_token(token)
        if account is None:
            return VerifyResult.NOT_FOUND

        if account.status is AccountStatus.UNVERIFIED and self.repository.activate(account.id):
            logger.info("Account id=%s verified", account.id)
            return VerifyResult.ACTIVATED

        return VerifyResult.UNCHANGED

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate by email and password and issue a session token.

        Unknown email and wrong password raise the same InvalidCredentials.
        A blocked account raises AccountBlocked. Unverified accounts may
        log in.
        """
        normalized_email = self._normalize_email(email or "")
        if not normalized_email or not password:
            raise ValidationFailed("Email and password are required")

        account = self.repository.find_by_email(normalized_email)
        if account is None:
            # Same hashing cost as a real comparison
            self.hasher.verify(password, self.hasher.dummy_hash())
            raise InvalidCredentials()

        if account.status is AccountStatus.BLOCKED:
            raise AccountBlocked(account.id)

        if not self.hasher.verify(password, account.password_hash):
            raise InvalidCredentials()

        self.repository.touch_last_login(account.id, self.clock())
        logger.info("Account id=%s logged in", account.id)
        return LoginResult(account=account, access_token=self.tokens.issue(account.id))

    def list_accounts(self) -> list[Account]:
        return self.repository.list_by_last_login()

    def block_accounts(self, actor: Account, account_ids: Iterable[int]) -> BulkResult:
        """Block every listed account; unknown ids are skipped."""
        ids = self._require_ids(account_ids)
        affected = self.repository.update_status(ids, AccountStatus.BLOCKED)
        logger.info("Account id=%s blocked %d of %d account(s)", actor.id, affected, len(ids))
        return BulkResult(requested=len(ids), affected=affected, self_affected=actor.id in ids)

    def unblock_accounts(self, actor: Account, account_ids: Iterable[int]) -> BulkResult:
        """Set every listed account to ACTIVE; unknown ids are skipped."""
        ids = self._require_ids(account_ids)
        affected = self.repository.update_status(ids, AccountStatus.ACTIVE)
        logger.info("Account id=%s unblocked %d of %d account(s)", actor.id, affected, len(ids))
        return BulkResult(requested=len(ids), affected=affected, self_affected=actor.id in ids)

    def delete_accounts(self, actor: Account, account_ids: Iterable[int]) -> BulkResult:
        """Permanently remove every listed account; unknown ids are skipped."""
        ids = self._require_ids(account_ids)
        affected = self.repository.delete_by_ids(ids)
        logger.info("Account id=%s deleted %d of %d account(s)", actor.id, affected, len(ids))
        return BulkResult(requested=len(ids), affected=affected, self_affected=actor.id in ids)

    def purge_unverified(self, actor: Account) -> PurgeResult:
        """
        Delete every UNVERIFIED account.

        ``actor`` is the snapshot resolved by the authorization gate for this
        request; an unverified actor is among the deleted rows.
        """
        deleted = self.repository.delete_by_status(AccountStatus.UNVERIFIED)
        logger.info("Account id=%s purged %d unverified account(s)", actor.id, deleted)
        return PurgeResult(
            deleted=deleted,
            self_affected=actor.status is AccountStatus.UNVERIFIED,
        )

    def _notify(self, email: str, token: str) -> None:
        """Hand the link to the sender; delivery problems never fail registration."""
        try:
            self.email_sender.send_verification_link(email, token)
        except Exception:
            logger.exception("Failed to dispatch verification email")

    def _require_ids(self, account_ids: Iterable[int]) -> frozenset[int]:
        ids = frozenset(account_ids or ())
        if not ids:
            raise ValidationFailed("No users selected")
        return ids

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()
