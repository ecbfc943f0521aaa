from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.enums import ChangeKind
from ..core.exceptions import PersistenceError
from ..realtime.feed import ChangeEvent, ChangeFeed
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One unit of work: commit on success, rollback and wrap driver errors."""
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("database connection failed: %s", exc)
        raise PersistenceError("Base de données indisponible") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.error("database operation failed: %s", exc)
        raise PersistenceError("Erreur de la base de données") from exc
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


def in_clause(values) -> str:
    """Placeholder list for ``IN (...)``."""
    return ",".join(["%s"] * len(values))


def like_pattern(text: str) -> str:
    """Case-folded ``%text%`` with LIKE wildcards escaped."""
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MySQLRepository:
    """Shared plumbing for MySQL repositories: connection factory + change feed."""

    table: str = ""

    def __init__(self, conn_factory: DatabaseConnection, feed: Optional[ChangeFeed] = None):
        self._conn_factory = conn_factory
        self._feed = feed

    def _publish(
        self,
        kind: ChangeKind,
        row_id: Optional[int],
        user_id: Optional[int] = None,
        *,
        table: Optional[str] = None,
    ) -> None:
        # Called after db_cursor has committed.
        if self._feed is None:
            return
        self._feed.publish(ChangeEvent(table=table or self.table, kind=kind, row_id=row_id, user_id=user_id))
