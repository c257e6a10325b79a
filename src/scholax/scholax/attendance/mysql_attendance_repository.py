from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceMark, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, teacher_id, subject, attendance_date, status, batch, section"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        teacher_id=int(r["teacher_id"]),
        subject=r["subject"],
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        batch=r["batch"],
        section=r["section"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_many(self, marks: Sequence[AttendanceMark]) -> int:
        if not marks:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records
                    (student_id, teacher_id, subject, attendance_date, status, batch, section)
                VALUES(%s,%s,%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    status=new.status,
                    teacher_id=new.teacher_id,
                    batch=new.batch,
                    section=new.section
                """,
                [
                    (m.student_id, m.teacher_id, m.subject, m.attendance_date, m.status.value, m.batch, m.section)
                    for m in marks
                ],
            )
            return len(marks)

    def list_for_student(
        self,
        student_id: int,
        *,
        subject: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["student_id=%s"]
        params: list[object] = [int(student_id)]

        if subject:
            clauses.append("subject=%s")
            params.append(subject)
        if start_date is not None:
            clauses.append("attendance_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("attendance_date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE {' AND '.join(clauses)}
                ORDER BY attendance_date DESC, subject ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_section(
        self,
        *,
        batch: str,
        section: str,
        subject: str,
        attendance_date: date,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE batch=%s AND section=%s AND subject=%s AND attendance_date=%s
                ORDER BY student_id ASC
                """,
                (batch, section, subject, attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_records")
            row = fetchone(cur) or {}
            return int(row.get("n") or 0)
