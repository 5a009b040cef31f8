"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers the OTP through a plain SMTP relay. Any delivery error is
reported as NotificationFailed so the registration attempt is aborted
before a token is issued.
"""

import logging
import smtplib
from email.message import EmailMessage

from otpgate.domain.exceptions import NotificationFailed

logger = logging.getLogger(__name__)

SUBJECT = "Your verification code"


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._from_email = from_email
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def build_message(self, email: str, code: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self._from_email
        message["To"] = email
        message.set_content(f"Your OTP is {code}. It expires in one hour.")
        return message

    def send_otp(self, email: str, code: str) -> None:
        """
        Send the OTP by email.

        Raises:
            NotificationFailed: On any SMTP or network error
        """
        message = self.build_message(email, code)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("OTP delivery to %s failed: %s", email, e)
            raise NotificationFailed() from e

        logger.info("OTP sent to %s", email)
