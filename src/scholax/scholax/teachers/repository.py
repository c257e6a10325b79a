from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TeacherAssignment, TeacherProfile


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: int) -> Optional[TeacherProfile]:
        raise NotImplementedError

    def get_by_account_id(self, account_id: int) -> Optional[TeacherProfile]:
        raise NotImplementedError

    def create(self, *, account_id: int, full_name: str, email: str) -> int:
        """Raises ConflictError if the account already has a teacher profile."""

        raise NotImplementedError

    def list_all(self) -> Sequence[TeacherProfile]:
        """All teachers with their assignments attached, ordered by name."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def add_assignment(self, *, teacher_id: int, batch: str, section: str, subject: str) -> int:
        """Raises ConflictError if the teacher already holds this assignment."""

        raise NotImplementedError

    def list_assignments(self, teacher_id: int) -> Sequence[TeacherAssignment]:
        raise NotImplementedError

    def has_assignment(self, *, teacher_id: int, batch: str, section: str, subject: str) -> bool:
        raise NotImplementedError
