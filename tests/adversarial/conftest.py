"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition and account
enumeration tests against a real PostgreSQL database.
"""

from unittest.mock import Mock

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.security import BcryptPasswordHasher, JwtSessionTokens
from src.domain.accounts import AccountService

SECRET = "adversarial-test-secret-key-long-enough"


@pytest.fixture
def repository(pool: ConnectionPool, clean_database) -> PostgresAccountRepository:
    """Create repository instance for each test on an empty table."""
    return PostgresAccountRepository(pool)


@pytest.fixture
def pg_service(repository: PostgresAccountRepository, hasher: BcryptPasswordHasher) -> AccountService:
    return AccountService(
        repository=repository,
        hasher=hasher,
        tokens=JwtSessionTokens(SECRET),
        email_sender=Mock(),
    )


@pytest.fixture
def pg_service_factory(repository: PostgresAccountRepository, hasher: BcryptPasswordHasher):
    """Build a new service per call, as the API does per request."""

    def factory() -> AccountService:
        return AccountService(
            repository=repository,
            hasher=hasher,
            tokens=JwtSessionTokens(SECRET),
            email_sender=Mock(),
        )

    return factory
