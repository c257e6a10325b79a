from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Login identity. Students and teachers hang their profile off one of these."""

    account_id: int
    email: str
    role: Role
    otp_code: Optional[str] = None
    otp_expires_at: Optional[datetime] = None
    is_verified: bool = False

    @property
    def has_pending_otp(self) -> bool:
        return bool(self.otp_code) and self.otp_expires_at is not None


@dataclass(frozen=True)
class Identity:
    """What a verified session token resolves to."""

    account_id: int
    email: str
    role: Role
