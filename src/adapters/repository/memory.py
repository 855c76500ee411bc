"""
In-memory repository adapter - Implements AccountRepository protocol.

Process-local store for development and tests. A single lock makes every
method atomic, giving the same uniqueness and all-or-nothing bulk
guarantees as the PostgreSQL adapter.
"""

import itertools
import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone

from src.domain.ports import Account, AccountStatus


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a dict keyed by id.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Ids come from a monotonically increasing counter and are never reused.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(
        self, name: str, email: str, password_hash: str, verification_token: str
    ) -> Account | None:
        with self._lock:
            if any(a.email == email for a in self._accounts.values()):
                return None
            account = Account(
                id=next(self._ids),
                name=name,
                email=email,
                password_hash=password_hash,
                status=AccountStatus.UNVERIFIED,
                created_at=datetime.now(timezone.utc),
                verification_token=verification_token,
            )
            self._accounts[account.id] = account
            return account

    def find_by_id(self, account_id: int) -> Account | None:
        with self._lock:
            return self._accounts.get(account_id)

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            return next((a for a in self._accounts.values() if a.email == email), None)

    def find_by_verification_token(self, token: str) -> Account | None:
        with self._lock:
            return next(
                (a for a in self._accounts.values() if a.verification_token == token), None
            )

    def activate(self, account_id: int) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None or account.status is not AccountStatus.UNVERIFIED:
                return False
            self._accounts[account_id] = replace(
                account, status=AccountStatus.ACTIVE, verification_token=None
            )
            return True

    def update_status(self, account_ids: Iterable[int], status: AccountStatus) -> int:
        with self._lock:
            matched = [i for i in set(account_ids) if i in self._accounts]
            for account_id in matched:
                self._accounts[account_id] = replace(self._accounts[account_id], status=status)
            return len(matched)

    def touch_last_login(self, account_id: int, at: datetime) -> None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is not None:
                self._accounts[account_id] = replace(account, last_login=at)

    def delete_by_ids(self, account_ids: Iterable[int]) -> int:
        with self._lock:
            matched = [i for i in set(account_ids) if i in self._accounts]
            for account_id in matched:
                del self._accounts[account_id]
            return len(matched)

    def delete_by_status(self, status: AccountStatus) -> int:
        with self._lock:
            matched = [i for i, a in self._accounts.items() if a.status is status]
            for account_id in matched:
                del self._accounts[account_id]
            return len(matched)

    def list_by_last_login(self) -> list[Account]:
        with self._lock:
            accounts = list(self._accounts.values())
        # Stable sorts: id, then login desc, then never-logged-in to the bottom
        accounts.sort(key=lambda a: a.id)
        accounts.sort(key=lambda a: a.last_login or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
        accounts.sort(key=lambda a: a.last_login is None)
        return accounts
