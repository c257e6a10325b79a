from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AddTeacherRequest:
    name: str
    email: str

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "AddTeacherRequest":
        payload = payload or {}
        name = str(payload.get("name") or "").strip()
        email = str(payload.get("email") or "").strip()
        if not name or not email:
            raise ValidationError("Name and email are required")
        return cls(name=name, email=email)


@dataclass(frozen=True)
class AssignTeacherRequest:
    teacher_id: int
    batch: str
    section: str
    subject: str

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "AssignTeacherRequest":
        payload = payload or {}
        batch = str(payload.get("batch") or "").strip()
        section = str(payload.get("section") or "").strip()
        subject = str(payload.get("subject") or "").strip()
        raw_id = payload.get("teacherId")
        if raw_id in (None, "") or not batch or not section or not subject:
            raise ValidationError("All fields are required")
        try:
            teacher_id = int(raw_id)
        except (TypeError, ValueError):
            raise ValidationError("Invalid teacher id")
        return cls(teacher_id=teacher_id, batch=batch, section=section, subject=subject)
