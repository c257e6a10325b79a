from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import TeacherAssignment, TeacherProfile
from .repository import TeacherRepository

_COLUMNS = "teacher_id, account_id, full_name, email"
_ASSIGNMENT_COLUMNS = "assignment_id, teacher_id, batch, section, subject"


def _to_assignment(row: dict) -> TeacherAssignment:
    return TeacherAssignment(
        assignment_id=int(row["assignment_id"]),
        teacher_id=int(row["teacher_id"]),
        batch=row["batch"],
        section=row["section"],
        subject=row["subject"],
    )


def _to_teacher(row: dict, assignments: Sequence[TeacherAssignment] = ()) -> TeacherProfile:
    return TeacherProfile(
        teacher_id=int(row["teacher_id"]),
        account_id=int(row["account_id"]),
        full_name=row["full_name"],
        email=row["email"],
        assignments=tuple(assignments),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[TeacherProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE {where}", params)
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS} FROM teacher_assignments
                WHERE teacher_id=%s
                ORDER BY batch DESC, section ASC, subject ASC
                """,
                (int(row["teacher_id"]),),
            )
            return _to_teacher(row, [_to_assignment(a) for a in fetchall(cur)])

    def get_by_id(self, teacher_id: int) -> Optional[TeacherProfile]:
        return self._get_one("teacher_id=%s", (int(teacher_id),))

    def get_by_account_id(self, account_id: int) -> Optional[TeacherProfile]:
        return self._get_one("account_id=%s", (int(account_id),))

    def create(self, *, account_id: int, full_name: str, email: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO teachers(account_id, full_name, email) VALUES(%s,%s,%s)",
                    (int(account_id), full_name, email),
                )
            except mysql.connector.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise
                raise ConflictError(f"Teacher with email {email} already exists") from e
            return int(cur.lastrowid)

    def list_all(self) -> Sequence[TeacherProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY full_name ASC")
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["teacher_id"]) for r in rows]
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS} FROM teacher_assignments
                WHERE teacher_id IN ({in_clause(ids)})
                ORDER BY batch DESC, section ASC, subject ASC
                """,
                tuple(ids),
            )
            by_teacher: dict[int, list[TeacherAssignment]] = defaultdict(list)
            for a in fetchall(cur):
                assignment = _to_assignment(a)
                by_teacher[assignment.teacher_id].append(assignment)

        return [_to_teacher(r, by_teacher.get(int(r["teacher_id"]), [])) for r in rows]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM teachers")
            row = fetchone(cur) or {}
            return int(row.get("n") or 0)

    def add_assignment(self, *, teacher_id: int, batch: str, section: str, subject: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO teacher_assignments(teacher_id, batch, section, subject)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(teacher_id), batch, section, subject),
                )
            except mysql.connector.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise
                raise ConflictError("This assignment already exists") from e
            return int(cur.lastrowid)

    def list_assignments(self, teacher_id: int) -> Sequence[TeacherAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS} FROM teacher_assignments
                WHERE teacher_id=%s
                ORDER BY batch DESC, section ASC, subject ASC
                """,
                (int(teacher_id),),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def has_assignment(self, *, teacher_id: int, batch: str, section: str, subject: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS ok FROM teacher_assignments
                WHERE teacher_id=%s AND batch=%s AND section=%s AND subject=%s
                LIMIT 1
                """,
                (int(teacher_id), batch, section, subject),
            )
            return fetchone(cur) is not None
