"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle state machine and the
authorization gate. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .accounts import AccountService, generate_verification_token
from .authorization import AuthorizationGate
from .exceptions import (
    AccountBlocked,
    AccountError,
    AccountRevoked,
    AuthenticationRequired,
    EmailAlreadyInUse,
    InfrastructureError,
    InvalidCredentials,
    SessionInvalid,
    SessionRejected,
    StoreUnavailable,
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

__all__ = [
    "Account",
    "AccountBlocked",
    "AccountError",
    "AccountRepository",
    "AccountRevoked",
    "AccountService",
    "AccountStatus",
    "AuthenticationRequired",
    "AuthorizationGate",
    "BulkResult",
    "EmailAlreadyInUse",
    "EmailSender",
    "InfrastructureError",
    "InvalidCredentials",
    "LoginResult",
    "PasswordHasher",
    "PurgeResult",
    "SessionInvalid",
    "SessionRejected",
    "SessionTokens",
    "StoreUnavailable",
    "ValidationFailed",
    "VerifyResult",
    "generate_verification_token",
]
