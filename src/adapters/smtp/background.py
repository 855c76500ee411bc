"""
Background email sender - detached, at-most-once delivery.

Wraps another EmailSender and runs it on a worker thread so the caller
never waits on the mail transport. Each link gets exactly one attempt:
no retry, no delivery guarantee. Failures are logged and dropped.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)


class BackgroundEmailSender:
    """Implements EmailSender protocol by handing off to a thread pool."""

    def __init__(self, sender: EmailSender, max_workers: int = 1) -> None:
        self._sender = sender
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="verification-email"
        )

    def send_verification_link(self, email: str, token: str) -> None:
        """Queue delivery and return immediately."""
        future = self._executor.submit(self._sender.send_verification_link, email, token)
        future.add_done_callback(self._log_failure)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with wait=True, block until queued sends finish."""
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Failed to send verification email: %s", exc)
