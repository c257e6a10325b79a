from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's status for one subject on one day."""

    attendance_id: int
    student_id: int
    teacher_id: int
    subject: str
    attendance_date: date
    status: AttendanceStatus
    batch: str
    section: str

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "subject": self.subject,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceMark:
    """Upsert payload keyed by (student_id, subject, attendance_date)."""

    student_id: int
    teacher_id: int
    subject: str
    attendance_date: date
    status: AttendanceStatus
    batch: str
    section: str


@dataclass(frozen=True)
class Tally:
    present: int = 0
    total: int = 0

    @property
    def percentage(self) -> float:
        return self.present / self.total * 100 if self.total else 0.0

    def to_dict(self) -> dict:
        return {"present": self.present, "total": self.total, "percentage": self.percentage}
