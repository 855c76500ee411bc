"""
SMTP email sender adapter - Implements EmailSender protocol.

Sends the verification link as an HTML email over SMTP with STARTTLS.
Errors propagate to the caller; BackgroundEmailSender is what keeps them
away from the registration request.
"""

import logging
import smtplib
from email.message import EmailMessage

from .console import build_verification_link

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    subject = "Verify your email - Account Manager"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_email: str,
        app_url: str,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username
        self.app_url = app_url
        self.timeout = timeout

    def build_message(self, email: str, token: str) -> EmailMessage:
        link = build_verification_link(self.app_url, token)

        message = EmailMessage()
        message["Subject"] = self.subject
        message["From"] = self.from_email
        message["To"] = email
        message.set_content(
            f"Open the link below to verify your email address:\n\n{link}\n\n"
            "If you did not register, please ignore this email."
        )
        message.add_alternative(
            f"""
            <h2>Email Verification</h2>
            <p>Click the link below to verify your email address:</p>
            <a href="{link}">{link}</a>
            <p>If you did not register, please ignore this email.</p>
            """,
            subtype="html",
        )
        return message

    def send_verification_link(self, email: str, token: str) -> None:
        message = self.build_message(email, token)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(message)
        logger.info("Verification email sent to %s", email)
