from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, Tally
from .repository import AttendanceRepository


def tally(records: Sequence[AttendanceRecord]) -> Tally:
    present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
    return Tally(present=present, total=len(records))


class AttendanceAggregator:
    """Per-subject and overall attendance, recomputed from raw records on each call."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def summarize(self, student_id: int) -> dict:
        records = self._attendance.list_for_student(int(student_id))

        by_subject: dict[str, list[AttendanceRecord]] = defaultdict(list)
        for r in records:
            by_subject[r.subject].append(r)

        subjects = [{"subject": subject, **tally(by_subject[subject]).to_dict()} for subject in sorted(by_subject)]
        return {"subjects": subjects, "overall": tally(records).to_dict()}

    def detail(
        self,
        student_id: int,
        *,
        subject: Optional[str] = None,
        year_month: Optional[str] = None,
    ) -> list[dict]:
        start_date = end_date = None
        if year_month:
            start_date, end_date = month_bounds(year_month)

        records = self._attendance.list_for_student(
            int(student_id),
            subject=(subject or "").strip() or None,
            start_date=start_date,
            end_date=end_date,
        )
        records = sorted(records, key=lambda r: r.attendance_date, reverse=True)
        return [
            {
                "id": r.attendance_id,
                "subject": r.subject,
                "date": r.attendance_date.isoformat(),
                "status": r.status.value,
            }
            for r in records
        ]
