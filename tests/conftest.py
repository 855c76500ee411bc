"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository and real adapters (bcrypt, JWT)
- Domain services wired against them
- Helpers for putting accounts into a given state
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.security import BcryptPasswordHasher, JwtSessionTokens
from src.domain.accounts import AccountService
from src.domain.authorization import AuthorizationGate
from src.domain.ports import Account, AccountStatus

TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"


@pytest.fixture(scope="session")
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=10)


@pytest.fixture
def tokens() -> JwtSessionTokens:
    return JwtSessionTokens(secret_key=TEST_SECRET, ttl=timedelta(hours=24))


@pytest.fixture
def memory_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> Mock:
    return Mock()


@pytest.fixture
def service(
    memory_repository: InMemoryAccountRepository,
    hasher: BcryptPasswordHasher,
    tokens: JwtSessionTokens,
    email_sender: Mock,
) -> AccountService:
    return AccountService(
        repository=memory_repository,
        hasher=hasher,
        tokens=tokens,
        email_sender=email_sender,
    )


@pytest.fixture
def gate(memory_repository: InMemoryAccountRepository, tokens: JwtSessionTokens) -> AuthorizationGate:
    return AuthorizationGate(repository=memory_repository, tokens=tokens)


def create_account(
    repository: InMemoryAccountRepository,
    email: str,
    status: AccountStatus = AccountStatus.UNVERIFIED,
    name: str = "Test User",
    password_hash: str = "$2b$10$placeholderhash",
    token: str | None = None,
) -> Account:
    """Insert an account and move it to ``status`` directly through the repository."""
    account = repository.insert(name, email, password_hash, token or f"token-{email}")
    assert account is not None
    if status is not AccountStatus.UNVERIFIED:
        repository.update_status([account.id], status)
    found = repository.find_by_id(account.id)
    assert found is not None
    return found


@pytest.fixture
def make_account(memory_repository: InMemoryAccountRepository):
    """Factory fixture: ``make_account(email, status=...)`` against the in-memory store."""

    def factory(email: str, status: AccountStatus = AccountStatus.UNVERIFIED, **kwargs) -> Account:
        return create_account(memory_repository, email, status, **kwargs)

    return factory


@pytest.fixture(scope="session")
def pool():
    """
    PostgreSQL connection pool with migrations applied.

    Tests that need the real store skip when DATABASE_URL is unreachable.
    """
    from psycopg_pool import ConnectionPool, PoolTimeout

    from src.adapters.repository.postgres import run_migrations
    from src.config.settings import get_settings

    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    try:
        pool.wait(timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not available at {settings.database_url}")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool):
    """Empty the accounts table before a test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield
