"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.security import BcryptPasswordHasher, JwtSessionTokens
from src.adapters.smtp.background import BackgroundEmailSender
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.smtp import SmtpEmailSender
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.authorization import AuthorizationGate
from src.domain.exceptions import AccountRevoked, SessionRejected
from src.domain.ports import Account, EmailSender


def build_email_sender(settings: Settings) -> BackgroundEmailSender:
    """
    Create the verification email sender for the configured backend.

    Whichever transport is chosen runs on a background thread so that
    registration never waits on it.
    """
    if settings.email_backend == "smtp":
        sender: EmailSender = SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_email=settings.smtp_from_email,
            app_url=settings.app_url,
        )
    else:
        sender = ConsoleEmailSender(app_url=settings.app_url)
    return BackgroundEmailSender(sender)


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_email_sender(request: Request) -> EmailSender:
    """Get the background email sender created at startup."""
    return request.app.state.email_sender


@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=get_settings().bcrypt_cost)


@lru_cache
def get_session_tokens() -> JwtSessionTokens:
    settings = get_settings()
    return JwtSessionTokens(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(hours=settings.session_ttl_hours),
    )


def get_account_service(request: Request) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the repository, hasher, session tokens and email sender.
    """
    return AccountService(
        repository=get_repository(request),
        hasher=get_password_hasher(),
        tokens=get_session_tokens(),
        email_sender=get_email_sender(request),
    )


def get_authorization_gate(request: Request) -> AuthorizationGate:
    return AuthorizationGate(repository=get_repository(request), tokens=get_session_tokens())


# Bearer scheme for OpenAPI documentation; the gate decides what a missing token means
http_bearer = HTTPBearer(auto_error=False)


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> Account:
    """
    Resolve the acting account through the authorization gate.

    Rejections carry a ``redirect`` flag in the detail telling the client
    whether to drop its stored session:
    - 401 "Authentication required" (no bearer token)
    - 401 "Invalid or expired token" (redirect)
    - 403 "Account has been deleted" / "Account is blocked" (redirect)
    """
    token = credentials.credentials if credentials is not None else None
    try:
        return gate.authorize(token)
    except SessionRejected as e:
        if isinstance(e, AccountRevoked):
            status_code, headers = status.HTTP_403_FORBIDDEN, None
        else:
            status_code, headers = status.HTTP_401_UNAUTHORIZED, {"WWW-Authenticate": "Bearer"}
        raise HTTPException(
            status_code=status_code,
            detail={"message": e.message, "redirect": e.redirect},
            headers=headers,
        ) from None
