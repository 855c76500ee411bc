"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification links for development.
"""

import logging

logger = logging.getLogger(__name__)


def build_verification_link(app_url: str, token: str) -> str:
    """Link the client app routes to the verify endpoint."""
    return f"{app_url.rstrip('/')}/verify/{token}"


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification links to stdout.
    """

    def __init__(self, app_url: str = "http://localhost:3000") -> None:
        self._app_url = app_url

    def send_verification_link(self, email: str, token: str) -> None:
        """
        Log verification link to console (simulates email delivery).

        The link is logged at INFO level to be visible in docker-compose logs.

        Args:
            email: Recipient email address (normalized by domain layer)
            token: Single-use verification token
        """
        logger.info(
            "[VERIFICATION] Email: %s Link: %s",
            email,
            build_verification_link(self._app_url, token),
        )
