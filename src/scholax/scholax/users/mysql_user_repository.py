from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.bulk import InsertOutcome
from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_name, fetchall, fetchone, in_clause, is_duplicate_key
from .model import Account
from .repository import AccountRepository

_COLUMNS = "account_id, email, role, otp_code, otp_expires_at, is_verified"


def _to_account(row: dict) -> Account:
    return Account(
        account_id=int(row["account_id"]),
        email=row["email"],
        role=Role(row["role"]),
        otp_code=row.get("otp_code"),
        otp_expires_at=row.get("otp_expires_at"),
        is_verified=bool(row.get("is_verified", False)),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE account_id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def list_by_emails(self, emails: Sequence[str]) -> Sequence[Account]:
        emails = list(dict.fromkeys(emails))
        if not emails:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM accounts WHERE email IN ({in_clause(emails)})",
                tuple(emails),
            )
            return [_to_account(r) for r in fetchall(cur)]

    def create(self, *, email: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO accounts(email, role, is_verified) VALUES(%s,%s,0)",
                    (email, role.value),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise ConflictError(f"Email {email} is already registered") from e
                raise
            return int(cur.lastrowid)

    def create_many(self, *, emails: Sequence[str], role: Role) -> Sequence[InsertOutcome]:
        outcomes: list[InsertOutcome] = []
        if not emails:
            return outcomes
        # One connection/transaction for the batch; a duplicate-key error only
        # rolls back its own statement under InnoDB.
        with db_cursor(self._conn_factory) as (_, cur):
            for email in emails:
                try:
                    cur.execute(
                        "INSERT INTO accounts(email, role, is_verified) VALUES(%s,%s,0)",
                        (email, role.value),
                    )
                except mysql.connector.IntegrityError as e:
                    if not is_duplicate_key(e):
                        raise
                    outcomes.append(InsertOutcome(key=email, conflict=duplicate_key_name(e) or "uq_accounts_email"))
                    continue
                outcomes.append(InsertOutcome(key=email, created_id=int(cur.lastrowid)))
        return outcomes

    def delete_orphans(self, account_ids: Sequence[int]) -> int:
        ids = [int(i) for i in dict.fromkeys(account_ids)]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE FROM accounts
                WHERE account_id IN ({in_clause(ids)})
                  AND NOT EXISTS (SELECT 1 FROM students s WHERE s.account_id = accounts.account_id)
                  AND NOT EXISTS (SELECT 1 FROM teachers t WHERE t.account_id = accounts.account_id)
                """,
                tuple(ids),
            )
            return int(cur.rowcount or 0)

    def set_otp(self, *, account_id: int, code: str, expires_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE accounts SET otp_code=%s, otp_expires_at=%s WHERE account_id=%s",
                (code, expires_at, int(account_id)),
            )
            return cur.rowcount > 0

    def consume_otp(self, *, account_id: int, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE accounts
                SET is_verified=1, otp_code=NULL, otp_expires_at=NULL
                WHERE account_id=%s AND otp_code=%s
                """,
                (int(account_id), code),
            )
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM accounts")
            return int(fetchone(cur)["n"])
