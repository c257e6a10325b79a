from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass(frozen=True)
class TeacherAssignment:
    assignment_id: int
    teacher_id: int
    batch: str
    section: str
    subject: str

    def to_dict(self) -> dict:
        return {
            "id": self.assignment_id,
            "batch": self.batch,
            "section": self.section,
            "subject": self.subject,
        }


@dataclass(frozen=True)
class TeacherProfile:
    teacher_id: int
    account_id: int
    full_name: str
    email: str
    assignments: Sequence[TeacherAssignment] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.teacher_id,
            "name": self.full_name,
            "email": self.email,
            "assignments": [a.to_dict() for a in self.assignments],
        }


@dataclass(frozen=True)
class SectionSummary:
    """Read-model for a teacher's dashboard: one assignment plus its roster size."""

    batch: str
    section: str
    subject: str
    student_count: int

    def to_dict(self) -> dict:
        return {
            "batch": self.batch,
            "section": self.section,
            "subject": self.subject,
            "studentCount": self.student_count,
        }
