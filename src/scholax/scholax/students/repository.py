from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.bulk import InsertOutcome
from .model import NewStudentProfile, StudentFilter, StudentProfile


class StudentRepository(Protocol):
    def get_by_account_id(self, account_id: int) -> Optional[StudentProfile]:
        raise NotImplementedError

    def get_by_registration_no(self, registration_no: str) -> Optional[StudentProfile]:
        raise NotImplementedError

    def list_by_registration_nos(self, registration_nos: Sequence[str]) -> Sequence[StudentProfile]:
        """Single-query lookup used by bulk import."""

        raise NotImplementedError

    def create(self, profile: NewStudentProfile) -> int:
        """Raises DuplicateRegistrationError / ConflictError on unique-key violations."""

        raise NotImplementedError

    def create_many(self, profiles: Sequence[NewStudentProfile]) -> Sequence[InsertOutcome]:
        """One outcome per profile, keyed by registration number."""

        raise NotImplementedError

    def search(self, flt: StudentFilter) -> Sequence[StudentProfile]:
        raise NotImplementedError

    def list_in_section(self, *, batch: str, section: str) -> Sequence[StudentProfile]:
        raise NotImplementedError

    def count_in_sections(self, pairs: Sequence[tuple[str, str]]) -> dict[tuple[str, str], int]:
        raise NotImplementedError

    def stats(self) -> dict:
        """Totals and breakdowns for the admin dashboard."""

        raise NotImplementedError
