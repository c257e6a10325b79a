from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.bulk import InsertOutcome
from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for Account.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def list_by_emails(self, emails: Sequence[str]) -> Sequence[Account]:
        """All accounts whose email is in ``emails``, in a single query."""

        raise NotImplementedError

    def create(self, *, email: str, role: Role) -> int:
        """Insert one account. Raises ConflictError if the email is taken."""

        raise NotImplementedError

    def create_many(self, *, emails: Sequence[str], role: Role) -> Sequence[InsertOutcome]:
        """Insert several accounts, one outcome per email; a conflict never aborts the rest."""

        raise NotImplementedError

    def delete_orphans(self, account_ids: Sequence[int]) -> int:
        """Delete the given accounts that have no student or teacher profile. Returns the number removed."""

        raise NotImplementedError

    def set_otp(self, *, account_id: int, code: str, expires_at: datetime) -> bool:
        raise NotImplementedError

    def consume_otp(self, *, account_id: int, code: str) -> bool:
        """Mark verified and clear the OTP, only if ``code`` is still the pending one."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
