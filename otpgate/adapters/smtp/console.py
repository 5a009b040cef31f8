"""
Log-only OTP delivery for local development.

Selected with ``EMAIL_BACKEND=console`` (the default). Codes end up in
the application log in clear text, so never run it in production:
anyone reading the log can confirm any pending registration.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """EmailSender that writes each code to the log instead of mailing it."""

    def send_otp(self, email: str, code: str) -> None:
        # Never fails, so stage() always issues a token in development
        logger.info("[OTP] Email: %s Code: %s", email, code)
