from __future__ import annotations

import logging
import smtplib
from collections import deque
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

SendResult = Tuple[bool, Optional[str]]

OTP_SUBJECT = "ScholaX - Your OTP Code"


def render_otp_email(code: str, *, ttl_minutes: int) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; background: #f5f5f5; padding: 20px;">
        <div style="background: white; max-width: 480px; margin: 0 auto; border-radius: 8px; padding: 30px;">
            <h2 style="color: #1e3a8a; margin-top: 0;">ScholaX Login</h2>
            <p>Use the following one-time code to sign in:</p>
            <p style="font-size: 32px; font-weight: bold; letter-spacing: 6px; color: #111;">{code}</p>
            <p style="color: #666;">This code expires in {ttl_minutes} minutes. If you did not request it, ignore this email.</p>
        </div>
    </body>
    </html>
    """


class EmailSender(Protocol):
    """Delivers OTP codes. Returns ``(success, error_message)``."""

    def send(self, to_address: str, code: str) -> SendResult:
        raise NotImplementedError


class SMTPEmailSender(EmailSender):
    def __init__(
        self,
        *,
        host: str,
        port: int,
        user: str,
        password: str,
        sender_name: str = "ScholaX",
        ttl_minutes: int = 10,
        timeout: float = 10,
    ):
        self._host = host
        self._port = int(port)
        self._user = user
        self._password = password
        self._sender_name = sender_name
        self._ttl_minutes = int(ttl_minutes)
        self._timeout = timeout

    def send(self, to_address: str, code: str) -> SendResult:
        if not to_address or "@" not in to_address:
            logger.warning("Invalid email address: %s", to_address)
            return False, "Invalid email address"

        msg = MIMEMultipart("alternative")
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = f"{self._sender_name} <{self._user}>"
        msg["To"] = to_address
        msg.attach(MIMEText(render_otp_email(code, ttl_minutes=self._ttl_minutes), "html"))

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                server.starttls()
                if self._user:
                    server.login(self._user, self._password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError:
            error_msg = "SMTP authentication failed - check the mail credentials"
            logger.error("Email failed - %s", error_msg)
            return False, error_msg
        except (smtplib.SMTPException, OSError) as e:
            error_msg = f"SMTP error: {e}"
            logger.error("Email failed to %s: %s", to_address, error_msg)
            return False, error_msg

        logger.info("OTP email sent to %s", to_address)
        return True, None


class ConsoleEmailSender(EmailSender):
    """Test-mode sender: logs the code instead of mailing it.

    Only the most recent ``keep`` deliveries are retained in ``sent``.
    """

    def __init__(self, keep: int = 50):
        self.sent: deque[tuple[str, str]] = deque(maxlen=keep)

    def send(self, to_address: str, code: str) -> SendResult:
        self.sent.append((to_address, code))
        logger.warning("EMAIL_TEST_MODE: OTP for %s is %s", to_address, code)
        return True, None
