from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError
from ..students.repository import StudentRepository
from ..teachers.model import TeacherProfile
from ..teachers.repository import TeacherRepository
from .model import AttendanceMark, AttendanceRecord
from .repository import AttendanceRepository
from .schemas import MarkAttendanceRequest, SectionAttendanceQuery

logger = logging.getLogger(__name__)


@dataclass
class MarkResult:
    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def fail(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    def to_dict(self) -> dict:
        return {"success": self.success, "failed": self.failed, "errors": list(self.errors)}


def _parse_student_id(value) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class AttendanceService:
    """Use case: teachers mark and review attendance for sections they are assigned to."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
    ):
        self._attendance = attendance
        self._teachers = teachers
        self._students = students

    def _teacher_for(self, account_id: int) -> TeacherProfile:
        teacher = self._teachers.get_by_account_id(account_id)
        if teacher is None:
            raise NotFoundError("Teacher record not found")
        return teacher

    def mark(self, *, teacher_account_id: int, request: MarkAttendanceRequest) -> MarkResult:
        teacher = self._teacher_for(teacher_account_id)
        if not self._teachers.has_assignment(
            teacher_id=teacher.teacher_id,
            batch=request.batch,
            section=request.section,
            subject=request.subject,
        ):
            raise AuthorizationError("You are not assigned to this section and subject")

        roster = {s.student_id for s in self._students.list_in_section(batch=request.batch, section=request.section)}

        result = MarkResult()
        marks: dict[int, AttendanceMark] = {}
        for entry in request.entries:
            raw_id = entry.get("studentId")
            raw_status = entry.get("status")
            if not raw_id or not raw_status:
                result.fail("Missing student ID or status")
                continue

            try:
                status = AttendanceStatus(str(raw_status).strip().lower())
            except ValueError:
                result.fail(f"Invalid status for student {raw_id}")
                continue

            student_id = _parse_student_id(raw_id)
            if student_id is None or student_id not in roster:
                result.fail(f"Student {raw_id} is not in {request.batch}/{request.section}")
                continue

            # The last entry for a student wins, matching re-mark semantics.
            marks[student_id] = AttendanceMark(
                student_id=student_id,
                teacher_id=teacher.teacher_id,
                subject=request.subject,
                attendance_date=request.attendance_date,
                status=status,
                batch=request.batch,
                section=request.section,
            )
            result.success += 1

        self._attendance.upsert_many(list(marks.values()))
        logger.info(
            "Attendance %s/%s %s on %s by teacher %s: %d marked, %d failed",
            request.batch,
            request.section,
            request.subject,
            request.attendance_date.isoformat(),
            teacher.teacher_id,
            result.success,
            result.failed,
        )
        return result

    def fetch_for_section(self, *, teacher_account_id: int, query: SectionAttendanceQuery) -> Sequence[AttendanceRecord]:
        self._teacher_for(teacher_account_id)
        return self._attendance.list_for_section(
            batch=query.batch,
            section=query.section,
            subject=query.subject,
            attendance_date=query.attendance_date,
        )
