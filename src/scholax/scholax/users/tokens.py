from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from .model import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class SessionTokenService:
    """Issue and verify signed session tokens (JWT, HS256)."""

    def __init__(self, secret_key: str, *, session_days: int = DEFAULT_SESSION_DAYS):
        if not secret_key:
            raise ValueError("secret_key is required to sign session tokens")
        self._secret_key = secret_key
        self._lifetime = timedelta(days=int(session_days))

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, identity: Identity, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(identity.account_id),
            "email": identity.email,
            "role": identity.role.value,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> Optional[Identity]:
        """Identity carried by ``token``, or None if it is missing, tampered or expired."""
        if not token:
            return None
        try:
            data = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
            return Identity(account_id=int(data["sub"]), email=str(data["email"]), role=Role(data["role"]))
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired session token")
            return None
        except (jwt.InvalidTokenError, KeyError, ValueError):
            logger.debug("Rejected invalid session token")
            return None
