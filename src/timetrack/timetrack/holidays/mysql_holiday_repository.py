from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import CompanyHoliday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, company_id, holiday_date, name, is_recurring"


def _to_holiday(r: dict) -> CompanyHoliday:
    return CompanyHoliday(
        holiday_id=int(r["holiday_id"]),
        company_id=int(r["company_id"]),
        holiday_date=r["holiday_date"],
        name=r["name"],
        is_recurring=as_bool(r.get("is_recurring")),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: int, *, year: Optional[int] = None) -> Sequence[CompanyHoliday]:
        where = "company_id=%s"
        params: tuple = (int(company_id),)
        if year is not None:
            where += " AND (YEAR(holiday_date)=%s OR is_recurring=1)"
            params += (int(year),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM company_holidays WHERE {where} ORDER BY holiday_date", params)
            return [_to_holiday(r) for r in fetchall(cur)]

    def get(self, company_id: int, holiday_id: int) -> Optional[CompanyHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM company_holidays WHERE company_id=%s AND holiday_id=%s",
                (int(company_id), int(holiday_id)),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def get_by_date(self, company_id: int, holiday_date: date) -> Optional[CompanyHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM company_holidays WHERE company_id=%s AND holiday_date=%s",
                (int(company_id), holiday_date),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def create(self, *, company_id: int, holiday_date: date, name: str, is_recurring: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO company_holidays(company_id, holiday_date, name, is_recurring) VALUES(%s,%s,%s,%s)",
                (int(company_id), holiday_date, name, 1 if is_recurring else 0),
            )
            return int(cur.lastrowid)

    def update(self, holiday: CompanyHoliday) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE company_holidays
                SET holiday_date=%s, name=%s, is_recurring=%s
                WHERE company_id=%s AND holiday_id=%s
                """,
                (
                    holiday.holiday_date,
                    holiday.name,
                    1 if holiday.is_recurring else 0,
                    holiday.company_id,
                    holiday.holiday_id,
                ),
            )
            return cur.rowcount >= 0

    def delete(self, company_id: int, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM company_holidays WHERE company_id=%s AND holiday_id=%s",
                (int(company_id), int(holiday_id)),
            )
            return cur.rowcount > 0
