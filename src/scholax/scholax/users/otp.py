from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from ..core.constants import OTP_MAX, OTP_MIN


def generate_otp() -> str:
    """6-digit code, uniform over [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def otp_expiry(now: datetime, ttl_minutes: int) -> datetime:
    return now + timedelta(minutes=int(ttl_minutes))


def is_otp_expired(expires_at: datetime, now: datetime) -> bool:
    return now > expires_at
