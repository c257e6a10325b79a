from __future__ import annotations

from functools import wraps
from typing import Iterable, Optional

from flask import g, request

from ..core.constants import SESSION_COOKIE_NAME
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import Identity
from .tokens import SessionTokenService


class AccessPolicy:
    """Resolve session tokens to identities and enforce role-scoped access."""

    def __init__(self, tokens: SessionTokenService):
        self._tokens = tokens

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        return self._tokens.verify(token) if token else None

    def resolve_first(self, tokens: Iterable[Optional[str]]) -> Optional[Identity]:
        """Identity for the first token that verifies."""
        for token in tokens:
            identity = self.resolve(token)
            if identity is not None:
                return identity
        return None

    def require_role(self, token: Optional[str], allowed_roles: Iterable[Role]) -> Identity:
        return self.require_any([token], allowed_roles)

    def require_any(self, tokens: Iterable[Optional[str]], allowed_roles: Iterable[Role]) -> Identity:
        """Like ``require_role``, accepting the first of several presented tokens that verifies."""
        identity = self.resolve_first(tokens)
        if identity is None:
            raise AuthenticationError("Unauthorized. Please login.")
        if identity.role not in set(allowed_roles):
            raise AuthorizationError("Forbidden. Insufficient permissions.")
        return identity


def tokens_from_request() -> list[str]:
    """Candidate session tokens: the ``token`` cookie, then ``Authorization: Bearer``."""
    tokens = []
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if cookie:
        tokens.append(cookie)

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        bearer = auth_header[len("Bearer "):].strip()
        if bearer:
            tokens.append(bearer)
    return tokens


def role_required(policy: AccessPolicy, *roles: Role):
    """View decorator: 401 without a valid session, 403 for other roles.

    With no ``roles`` any authenticated identity is accepted. The identity is
    stored as ``g.identity`` for the view.
    """
    allowed = tuple(roles) or tuple(Role)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = policy.require_any(tokens_from_request(), allowed)
            return view(*args, **kwargs)

        return wrapper

    return decorator
