from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for access control."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"


class ImportRowError(str, Enum):
    """Reason a single bulk-import row was not created."""

    MISSING_DATA = "missing_data"
    INVALID_DATA = "invalid_data"
    DUPLICATE_REGISTRATION = "duplicate_registration"
    ROLE_CONFLICT = "role_conflict"
    CONFLICT = "conflict"
