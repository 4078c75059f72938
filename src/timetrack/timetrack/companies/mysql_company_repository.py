from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone
from .model import Company
from .repository import CompanyRepository

_COLUMNS = """
    company_id, name, active, utc_offset_minutes, latitude, longitude,
    geofence_radius_meters, require_geolocation, auto_punchout_enabled,
    auto_punchout_max_minutes, auto_punchout_margin_before, auto_punchout_margin_after
"""


def _to_company(r: dict) -> Company:
    return Company(
        company_id=int(r["company_id"]),
        name=r["name"],
        active=as_bool(r["active"]),
        utc_offset_minutes=int(r["utc_offset_minutes"]) if r.get("utc_offset_minutes") is not None else None,
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
        geofence_radius_meters=int(r["geofence_radius_meters"]),
        require_geolocation=as_bool(r["require_geolocation"]),
        auto_punchout_enabled=as_bool(r["auto_punchout_enabled"]),
        auto_punchout_max_minutes=int(r["auto_punchout_max_minutes"]),
        auto_punchout_margin_before=int(r["auto_punchout_margin_before"]),
        auto_punchout_margin_after=int(r["auto_punchout_margin_after"]),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
            return _to_company(r) if r else None

    def list_active(self) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE active=1 ORDER BY company_id")
            return [_to_company(r) for r in fetchall(cur)]
