from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StudentProfile:
    student_id: int
    account_id: int
    full_name: str
    registration_no: str
    branch: str
    batch: str
    section: str
    email: str

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.full_name,
            "registrationNo": self.registration_no,
            "branch": self.branch,
            "batch": self.batch,
            "section": self.section,
            "email": self.email,
        }


@dataclass(frozen=True)
class NewStudentProfile:
    """Insert payload; the store assigns ``student_id``."""

    account_id: int
    full_name: str
    registration_no: str
    branch: str
    batch: str
    section: str
    email: str


@dataclass(frozen=True)
class StudentFilter:
    batch: Optional[str] = None
    section: Optional[str] = None
    branch: Optional[str] = None
    search: Optional[str] = None
