from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class MarkAttendanceRequest:
    attendance_date: date
    batch: str
    section: str
    subject: str
    # Per-entry problems are reported in the result, not raised, so entries stay raw.
    entries: Sequence[Mapping[str, Any]]

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "MarkAttendanceRequest":
        payload = payload or {}
        entries = payload.get("attendanceRecords")
        if not isinstance(entries, list) or not entries:
            raise ValidationError("Attendance records are required")
        if not all(payload.get(k) for k in ("date", "batch", "section", "subject")):
            raise ValidationError("Date, batch, section, and subject are required")

        return cls(
            attendance_date=parse_iso_date(str(payload["date"])),
            batch=str(payload["batch"]).strip(),
            section=str(payload["section"]).strip().upper(),
            subject=str(payload["subject"]).strip(),
            entries=[e if isinstance(e, Mapping) else {} for e in entries],
        )


@dataclass(frozen=True)
class SectionAttendanceQuery:
    batch: str
    section: str
    subject: str
    attendance_date: date

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "SectionAttendanceQuery":
        if not all(args.get(k) for k in ("batch", "section", "subject", "date")):
            raise ValidationError("Batch, section, subject, and date are required")
        return cls(
            batch=require_non_empty(args.get("batch"), "Batch"),
            section=require_non_empty(args.get("section"), "Section").upper(),
            subject=require_non_empty(args.get("subject"), "Subject"),
            attendance_date=parse_iso_date(str(args.get("date"))),
        )
