from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(connection, cursor)`` inside a single transaction.

    Commits when the block exits cleanly, rolls back and re-raises otherwise.
    Bulk imports rely on this to stay all-or-nothing.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        except Exception:
            logger.debug("Rolling back transaction", exc_info=True)
            conn.rollback()
            raise
        finally:
            cur.close()
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def in_clause(column: str, values: Iterable[Any]) -> Tuple[str, List[Any]]:
    """Return ``(sql, params)`` for ``column IN (...)``.

    An empty collection yields a predicate that never matches, so callers can
    filter by an optional id list without special-casing it.
    """
    params = list(values)
    if not params:
        return "1=0", []
    return f"{column} IN ({', '.join('%s' for _ in params)})", params


def as_bool(value: Any) -> bool:
    # TINYINT(1) columns come back as 0/1
    return value is not None and bool(int(value))


def as_float(value: Any) -> Optional[float]:
    # DECIMAL columns (coordinates, day counts) come back as Decimal
    return None if value is None else float(value)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Convert a TIME column to ``datetime.time``.

    The C extension and the pure-Python connector disagree here: shift
    boundaries may arrive as ``time``, ``timedelta`` or ``'HH:MM[:SS]'``.
    """
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds // 60) % 60, seconds % 60)

    if isinstance(value, str):
        hh, _, rest = value.strip().partition(":")
        mm, _, ss = rest.partition(":")
        if not hh or not mm:
            raise ValueError(f"Invalid TIME value: {value!r}")
        return time(int(hh), int(mm), int(ss or 0))

    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")
