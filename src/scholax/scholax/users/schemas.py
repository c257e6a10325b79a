from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import is_valid_email
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class OTPRequest:
    email: str

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "OTPRequest":
        email = str((payload or {}).get("email") or "").strip().lower()
        if not is_valid_email(email):
            raise ValidationError("Invalid email address")
        return cls(email=email)


@dataclass(frozen=True)
class VerifyOTPRequest:
    email: str
    otp: str

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "VerifyOTPRequest":
        payload = payload or {}
        email = str(payload.get("email") or "").strip().lower()
        otp = str(payload.get("otp") or "")
        if not email or not otp:
            raise ValidationError("Email and OTP are required")
        return cls(email=email, otp=otp)
