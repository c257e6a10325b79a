from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

_DUP_KEY_RE = re.compile(r"for key '(?:[^'.]+\.)?([^']+)'")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except (mysql.connector.OperationalError, mysql.connector.InterfaceError) as e:
        conn.rollback()
        raise StoreUnavailableError("Database unavailable") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)`` with one ``%s`` per value."""
    return ", ".join(["%s"] * len(values))


def is_duplicate_key(err: mysql.connector.Error) -> bool:
    return isinstance(err, mysql.connector.IntegrityError) and err.errno == errorcode.ER_DUP_ENTRY


def duplicate_key_name(err: mysql.connector.Error) -> Optional[str]:
    """Name of the unique index a duplicate-entry error refers to.

    MySQL 8 reports ``for key 'table.index'``, older servers ``for key 'index'``.
    """
    m = _DUP_KEY_RE.search(str(getattr(err, "msg", "") or err))
    return m.group(1) if m else None
