"""
Domain exceptions - Semantic error types for the account lifecycle.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class ValidationFailed(AccountError):
    """Required input is missing or empty."""

    pass


class EmailAlreadyInUse(AccountError):
    """Store rejected the insert on the email uniqueness constraint."""

    pass


class InvalidCredentials(AccountError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    pass


class AccountBlocked(AccountError):
    """Login attempted on a blocked account."""

    pass


class SessionRejected(AccountError):
    """
    Authorization gate refused a request.

    ``redirect`` tells the client whether it should discard its local
    session state and send the user back to the login screen.
    """

    redirect = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationRequired(SessionRejected):
    """No session credential was presented."""

    def __init__(self) -> None:
        super().__init__("Authentication required")


class SessionInvalid(SessionRejected):
    """Session credential failed signature or expiry checks."""

    redirect = True

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


class AccountRevoked(SessionRejected):
    """Credential is valid but the account was deleted or blocked."""

    redirect = True


class InfrastructureError(Exception):
    """A collaborator (store, hasher, mail transport) is unavailable."""

    pass


class StoreUnavailable(InfrastructureError):
    """Credential store could not complete the operation."""

    pass
