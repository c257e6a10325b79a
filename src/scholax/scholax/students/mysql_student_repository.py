from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..common.bulk import InsertOutcome
from ..core.exceptions import ConflictError, DuplicateRegistrationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_name, fetchall, fetchone, in_clause, is_duplicate_key
from .model import NewStudentProfile, StudentFilter, StudentProfile
from .repository import StudentRepository

_COLUMNS = "student_id, account_id, full_name, registration_no, branch, batch, section, email"

_INSERT = """
    INSERT INTO students(account_id, full_name, registration_no, branch, batch, section, email)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""


def _to_student(row: dict) -> StudentProfile:
    return StudentProfile(
        student_id=int(row["student_id"]),
        account_id=int(row["account_id"]),
        full_name=row["full_name"],
        registration_no=row["registration_no"],
        branch=row["branch"],
        batch=row["batch"],
        section=row["section"],
        email=row["email"],
    )


def _insert_params(p: NewStudentProfile) -> tuple:
    return (p.account_id, p.full_name, p.registration_no, p.branch, p.batch, p.section, p.email)


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}", params)
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_account_id(self, account_id: int) -> Optional[StudentProfile]:
        return self._get_one("account_id=%s", (int(account_id),))

    def get_by_registration_no(self, registration_no: str) -> Optional[StudentProfile]:
        return self._get_one("registration_no=%s", (registration_no,))

    def list_by_registration_nos(self, registration_nos: Sequence[str]) -> Sequence[StudentProfile]:
        regs = list(dict.fromkeys(registration_nos))
        if not regs:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE registration_no IN ({in_clause(regs)})",
                tuple(regs),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def create(self, profile: NewStudentProfile) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(_INSERT, _insert_params(profile))
            except mysql.connector.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise
                if "registration" in (duplicate_key_name(e) or ""):
                    raise DuplicateRegistrationError(
                        f"Student with registration number {profile.registration_no} already exists"
                    ) from e
                raise ConflictError(f"Account {profile.email} already has a student profile") from e
            return int(cur.lastrowid)

    def create_many(self, profiles: Sequence[NewStudentProfile]) -> Sequence[InsertOutcome]:
        outcomes: list[InsertOutcome] = []
        if not profiles:
            return outcomes
        with db_cursor(self._conn_factory) as (_, cur):
            for p in profiles:
                try:
                    cur.execute(_INSERT, _insert_params(p))
                except mysql.connector.IntegrityError as e:
                    if not is_duplicate_key(e):
                        raise
                    outcomes.append(InsertOutcome(key=p.registration_no, conflict=duplicate_key_name(e) or "unique"))
                    continue
                outcomes.append(InsertOutcome(key=p.registration_no, created_id=int(cur.lastrowid)))
        return outcomes

    def search(self, flt: StudentFilter) -> Sequence[StudentProfile]:
        clauses: list[str] = []
        params: list[object] = []

        if flt.batch:
            clauses.append("batch=%s")
            params.append(flt.batch)
        if flt.section:
            clauses.append("section=%s")
            params.append(flt.section.upper())
        if flt.branch:
            clauses.append("branch=%s")
            params.append(flt.branch.upper())
        if flt.search:
            clauses.append("(full_name LIKE %s OR registration_no LIKE %s)")
            escaped = flt.search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            like = f"%{escaped}%"
            params.extend([like, like])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students {where} ORDER BY registration_no ASC",
                tuple(params),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def list_in_section(self, *, batch: str, section: str) -> Sequence[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM students
                WHERE batch=%s AND section=%s
                ORDER BY registration_no ASC
                """,
                (batch, section.upper()),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def count_in_sections(self, pairs: Sequence[tuple[str, str]]) -> dict[tuple[str, str], int]:
        pairs = list(dict.fromkeys(pairs))
        if not pairs:
            return {}
        where = " OR ".join(["(batch=%s AND section=%s)"] * len(pairs))
        params: list[object] = []
        for batch, section in pairs:
            params.extend([batch, section])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT batch, section, COUNT(*) AS n FROM students WHERE {where} GROUP BY batch, section",
                tuple(params),
            )
            counts = {(r["batch"], r["section"]): int(r["n"]) for r in fetchall(cur)}
        return {pair: counts.get(pair, 0) for pair in pairs}

    def stats(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total,
                       COUNT(DISTINCT batch) AS batches,
                       COUNT(DISTINCT section) AS sections
                FROM students
                """
            )
            totals = fetchone(cur) or {}
            cur.execute("SELECT branch, COUNT(*) AS n FROM students GROUP BY branch ORDER BY n DESC, branch ASC")
            by_branch = [{"branch": r["branch"], "count": int(r["n"])} for r in fetchall(cur)]
            cur.execute("SELECT batch, COUNT(*) AS n FROM students GROUP BY batch ORDER BY batch DESC")
            by_batch = [{"batch": r["batch"], "count": int(r["n"])} for r in fetchall(cur)]

        return {
            "totalStudents": int(totals.get("total") or 0),
            "totalBatches": int(totals.get("batches") or 0),
            "totalSections": int(totals.get("sections") or 0),
            "studentsByBranch": by_branch,
            "studentsByBatch": by_batch,
        }
