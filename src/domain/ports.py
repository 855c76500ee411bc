"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the account record, the value types returned by the
lifecycle service, and the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class AccountStatus(str, Enum):
    """
    Account trust states.

    State Transitions:
    - (none) -> UNVERIFIED (registration)
    - UNVERIFIED -> ACTIVE (verification link redeemed)
    - any -> BLOCKED (administrative block)
    - BLOCKED -> ACTIVE (administrative unblock)

    There is no terminal status: accounts leave the machine only by
    deletion, which removes the row entirely.
    """

    UNVERIFIED = "unverified"
    ACTIVE = "active"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Account:
    """Snapshot of a persisted account row."""

    id: int
    name: str
    email: str
    password_hash: str
    status: AccountStatus
    created_at: datetime
    last_login: datetime | None = None
    verification_token: str | None = None


class VerifyResult(Enum):
    """
    Result of redeeming a verification token.

    UNCHANGED covers both an already-active account and a blocked one:
    proving mailbox ownership never lifts an administrative block.
    """

    ACTIVATED = "activated"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class LoginResult:
    """Successful login: the account and its freshly issued session token."""

    account: Account
    access_token: str


@dataclass(frozen=True)
class BulkResult:
    """Outcome of a bulk block/unblock/delete."""

    requested: int
    affected: int
    self_affected: bool


@dataclass(frozen=True)
class PurgeResult:
    """Outcome of purging unverified accounts."""

    deleted: int
    self_affected: bool


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def insert(
        self, name: str, email: str, password_hash: str, verification_token: str
    ) -> Account | None:
        """
        Atomically insert a new UNVERIFIED account.

        The store's unique index on email decides the winner of concurrent
        inserts; there is no check-then-insert.

        Returns:
            The created account, or None if the email is already in use
        """
        ...

    def find_by_id(self, account_id: int) -> Account | None: ...

    def find_by_email(self, email: str) -> Account | None: ...

    def find_by_verification_token(self, token: str) -> Account | None: ...

    def activate(self, account_id: int) -> bool:
        """
        Move an UNVERIFIED account to ACTIVE and clear its token.

        Conditional on the current status, so a concurrent block wins.

        Returns:
            True if the row was transitioned
        """
        ...

    def update_status(self, account_ids: Iterable[int], status: AccountStatus) -> int:
        """Set status on every matching account in one statement. Returns rows updated."""
        ...

    def touch_last_login(self, account_id: int, at: datetime) -> None: ...

    def delete_by_ids(self, account_ids: Iterable[int]) -> int:
        """Remove matching rows in one statement. Returns rows deleted."""
        ...

    def delete_by_status(self, status: AccountStatus) -> int:
        """Remove every row in the given status in one statement. Returns rows deleted."""
        ...

    def list_by_last_login(self) -> list[Account]:
        """All accounts, most recent login first, never-logged-in last."""
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way salted password hashing."""

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...

    def dummy_hash(self) -> str:
        """A stable hash at the working cost, compared against when no account matches."""
        ...


class SessionTokens(Protocol):
    """Port interface for signed, time-limited session credentials."""

    def issue(self, account_id: int) -> str:
        """Mint a credential bound to ``account_id``."""
        ...

    def verify(self, token: str) -> int | None:
        """
        Validate signature and expiry.

        Returns:
            The bound account id, or None if the token is invalid or expired
        """
        ...


class EmailSender(Protocol):
    """Port interface for verification email delivery."""

    def send_verification_link(self, email: str, token: str) -> None:
        """
        Deliver the verification link for ``token`` to ``email``.

        Args:
            email: Recipient email address
            token: Single-use verification token
        """
        ...
