from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceMark, AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_many(self, marks: Sequence[AttendanceMark]) -> int:
        """Insert or overwrite (status, teacher) per (student, subject, date). Returns rows written."""

        raise NotImplementedError

    def list_for_student(
        self,
        student_id: int,
        *,
        subject: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records for one student, newest first; date bounds are inclusive."""

        raise NotImplementedError

    def list_for_section(
        self,
        *,
        batch: str,
        section: str,
        subject: str,
        attendance_date: date,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
