from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import normalize_email
from ..core.constants import ADMIN_DISPLAY_NAME, DEFAULT_OTP_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import (
    DeliveryFailedError,
    NoPendingOTPError,
    NotFoundError,
    OTPExpiredError,
    OTPMismatchError,
    ValidationError,
)
from ..notifications.email_sender import EmailSender
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository
from .model import Account, Identity
from .otp import generate_otp, is_otp_expired, otp_expiry
from .repository import AccountRepository
from .tokens import SessionTokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: dict


class AuthService:
    """Use case: passwordless login with emailed one-time codes.

    OTP state lives on the Account: ``request_otp`` sets code and expiry,
    a successful ``verify_otp`` clears both and issues a session token.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        students: StudentRepository,
        teachers: TeacherRepository,
        *,
        email_sender: EmailSender,
        tokens: SessionTokenService,
        otp_ttl_minutes: int = DEFAULT_OTP_TTL_MINUTES,
    ):
        self._accounts = accounts
        self._students = students
        self._teachers = teachers
        self._email_sender = email_sender
        self._tokens = tokens
        self._otp_ttl_minutes = int(otp_ttl_minutes)

    def _get_account(self, email: str) -> Account:
        account = self._accounts.get_by_email(normalize_email(email))
        if account is None:
            raise NotFoundError("User not found. Please contact admin.")
        return account

    def request_otp(self, email: str, *, now: Optional[datetime] = None) -> None:
        now = now or now_local()
        account = self._get_account(email)

        code = generate_otp()
        self._accounts.set_otp(
            account_id=account.account_id,
            code=code,
            expires_at=otp_expiry(now, self._otp_ttl_minutes),
        )

        ok, error = self._email_sender.send(account.email, code)
        if not ok:
            logger.error("OTP delivery to %s failed: %s", account.email, error)
            raise DeliveryFailedError("Failed to send OTP email")
        logger.info("OTP requested for %s", account.email)

    def verify_otp(self, email: str, code: str, *, now: Optional[datetime] = None) -> LoginResult:
        now = now or now_local()
        account = self._get_account(email)
        if not code:
            raise ValidationError("OTP is required")

        if not account.has_pending_otp:
            raise NoPendingOTPError("No OTP found. Please request a new one.")
        if is_otp_expired(account.otp_expires_at, now):
            logger.info("Expired OTP presented for %s", account.email)
            raise OTPExpiredError("OTP has expired. Please request a new one.")
        if account.otp_code != code:
            logger.info("Invalid OTP presented for %s", account.email)
            raise OTPMismatchError("Invalid OTP")

        # Lost a race with a concurrent verify of the same code.
        if not self._accounts.consume_otp(account_id=account.account_id, code=code):
            raise NoPendingOTPError("No OTP found. Please request a new one.")

        identity = Identity(account_id=account.account_id, email=account.email, role=account.role)
        token = self._tokens.issue(identity)
        logger.info("Login verified for %s (%s)", account.email, account.role.value)
        return LoginResult(token=token, user=self._profile(identity, is_verified=True))

    def me(self, identity: Identity) -> dict:
        account = self._accounts.get_by_id(identity.account_id)
        if account is None:
            raise NotFoundError("User not found")
        return self._profile(identity, is_verified=account.is_verified)

    def _profile(self, identity: Identity, *, is_verified: bool) -> dict:
        data = {
            "id": identity.account_id,
            "email": identity.email,
            "role": identity.role.value,
            "isVerified": is_verified,
        }

        if identity.role == Role.STUDENT:
            student = self._students.get_by_account_id(identity.account_id)
            if student is not None:
                data.update(
                    name=student.full_name,
                    registrationNo=student.registration_no,
                    branch=student.branch,
                    batch=student.batch,
                    section=student.section,
                )
        elif identity.role == Role.TEACHER:
            teacher = self._teachers.get_by_account_id(identity.account_id)
            if teacher is not None:
                data.update(name=teacher.full_name, teacherId=teacher.teacher_id)
        else:
            data["name"] = ADMIN_DISPLAY_NAME

        return data

