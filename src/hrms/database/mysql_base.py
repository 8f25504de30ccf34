from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from .connection import DatabaseConnection
from .errors import DuplicateKeyError, StorageError

logger = logging.getLogger(__name__)

_DUP_KEY_RE = re.compile(r"for key '(?:[^'.]+\.)?([^']+)'")


def _translate(exc: mysql.connector.Error) -> StorageError:
    if isinstance(exc, mysql.connector.IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY:
        match = _DUP_KEY_RE.search(str(exc.msg or ""))
        return DuplicateKeyError(str(exc), key=match.group(1) if match else None)
    return StorageError(str(exc))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` on a fresh connection and commit on success.

    mysql-connector errors are re-raised as ``StorageError`` (or
    ``DuplicateKeyError`` for UNIQUE key violations) after rollback.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("Database connection failed: %s", exc)
        raise StorageError("Database unavailable") from exc
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise _translate(exc) from exc
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
