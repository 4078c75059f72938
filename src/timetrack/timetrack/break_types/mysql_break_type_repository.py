from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import BreakType
from .repository import BreakTypeRepository

_COLUMNS = "break_type_id, company_id, name, description, color, active, requires_reason, max_minutes"


def _to_break_type(r: dict) -> BreakType:
    return BreakType(
        break_type_id=int(r["break_type_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        description=r.get("description"),
        color=r.get("color") or "",
        active=as_bool(r.get("active")),
        requires_reason=as_bool(r.get("requires_reason")),
        max_minutes=int(r["max_minutes"]) if r.get("max_minutes") is not None else None,
    )


class MySQLBreakTypeRepository(BreakTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[BreakType]:
        where = "company_id=%s AND active=1" if active_only else "company_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_types WHERE {where} ORDER BY name", (int(company_id),))
            return [_to_break_type(r) for r in fetchall(cur)]

    def get(self, company_id: int, break_type_id: int) -> Optional[BreakType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM break_types WHERE company_id=%s AND break_type_id=%s",
                (int(company_id), int(break_type_id)),
            )
            r = fetchone(cur)
            return _to_break_type(r) if r else None

    def get_by_name(self, company_id: int, name: str) -> Optional[BreakType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_types WHERE company_id=%s AND name=%s", (int(company_id), name))
            r = fetchone(cur)
            return _to_break_type(r) if r else None

    def create(
        self,
        *,
        company_id: int,
        name: str,
        description: Optional[str],
        color: str,
        requires_reason: bool,
        max_minutes: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO break_types(company_id, name, description, color, requires_reason, max_minutes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), name, description, color, 1 if requires_reason else 0, max_minutes),
            )
            return int(cur.lastrowid)

    def update(self, break_type: BreakType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE break_types
                SET name=%s, description=%s, color=%s, active=%s, requires_reason=%s, max_minutes=%s
                WHERE company_id=%s AND break_type_id=%s
                """,
                (
                    break_type.name,
                    break_type.description,
                    break_type.color,
                    1 if break_type.active else 0,
                    1 if break_type.requires_reason else 0,
                    break_type.max_minutes,
                    break_type.company_id,
                    break_type.break_type_id,
                ),
            )
            return cur.rowcount >= 0

    def delete(self, company_id: int, break_type_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM break_types WHERE company_id=%s AND break_type_id=%s",
                (int(company_id), int(break_type_id)),
            )
            return cur.rowcount > 0

    def count_entries(self, break_type_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM time_entries WHERE break_type_id=%s", (int(break_type_id),))
            r = fetchone(cur)
            return int(r["total"]) if r else 0
