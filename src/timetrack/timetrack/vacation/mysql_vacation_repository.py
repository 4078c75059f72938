from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone
from .model import VacationBalance, VacationPolicy
from .repository import VacationRepository

_POLICY_COLUMNS = "policy_id, company_id, name, yearly_days, max_carry_over_days, min_notice_days, allow_half_days, active"
_BALANCE_COLUMNS = """
    balance_id, company_id, employee_id, policy_id, year, total_days, used_days, pending_days,
    adjusted_days, carried_over_days
"""


def _days(value) -> float:
    return as_float(value) or 0.0


def _to_policy(r: dict) -> VacationPolicy:
    return VacationPolicy(
        policy_id=int(r["policy_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        yearly_days=_days(r["yearly_days"]),
        max_carry_over_days=_days(r["max_carry_over_days"]),
        min_notice_days=int(r["min_notice_days"]),
        allow_half_days=as_bool(r.get("allow_half_days")),
        active=as_bool(r.get("active")),
    )


def _to_balance(r: dict) -> VacationBalance:
    return VacationBalance(
        balance_id=int(r["balance_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        policy_id=int(r["policy_id"]) if r.get("policy_id") is not None else None,
        year=int(r["year"]),
        total_days=_days(r["total_days"]),
        used_days=_days(r["used_days"]),
        pending_days=_days(r["pending_days"]),
        adjusted_days=_days(r["adjusted_days"]),
        carried_over_days=_days(r["carried_over_days"]),
    )


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_policies(self, company_id: int, *, active_only: bool = False) -> Sequence[VacationPolicy]:
        where = "company_id=%s AND active=1" if active_only else "company_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_POLICY_COLUMNS} FROM vacation_policies WHERE {where} ORDER BY policy_id", (int(company_id),))
            return [_to_policy(r) for r in fetchall(cur)]

    def get_policy(self, company_id: int, policy_id: int) -> Optional[VacationPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_POLICY_COLUMNS} FROM vacation_policies WHERE company_id=%s AND policy_id=%s",
                (int(company_id), int(policy_id)),
            )
            r = fetchone(cur)
            return _to_policy(r) if r else None

    def create_policy(
        self,
        *,
        company_id: int,
        name: str,
        yearly_days: float,
        max_carry_over_days: float,
        min_notice_days: int,
        allow_half_days: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_policies(
                    company_id, name, yearly_days, max_carry_over_days, min_notice_days, allow_half_days
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), name, yearly_days, max_carry_over_days, int(min_notice_days), 1 if allow_half_days else 0),
            )
            return int(cur.lastrowid)

    def update_policy(self, policy: VacationPolicy) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_policies
                SET name=%s, yearly_days=%s, max_carry_over_days=%s, min_notice_days=%s,
                    allow_half_days=%s, active=%s
                WHERE company_id=%s AND policy_id=%s
                """,
                (
                    policy.name,
                    policy.yearly_days,
                    policy.max_carry_over_days,
                    policy.min_notice_days,
                    1 if policy.allow_half_days else 0,
                    1 if policy.active else 0,
                    policy.company_id,
                    policy.policy_id,
                ),
            )
            return cur.rowcount >= 0

    def get_balance(self, company_id: int, employee_id: int, year: int) -> Optional[VacationBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM vacation_balances WHERE company_id=%s AND employee_id=%s AND year=%s",
                (int(company_id), int(employee_id), int(year)),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def create_balance(
        self,
        *,
        company_id: int,
        employee_id: int,
        policy_id: Optional[int],
        year: int,
        total_days: float,
        carried_over_days: float,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_balances(company_id, employee_id, policy_id, year, total_days, carried_over_days)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), int(employee_id), policy_id, int(year), total_days, carried_over_days),
            )
            return int(cur.lastrowid)

    def update_balance(self, balance: VacationBalance) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_balances
                SET total_days=%s, used_days=%s, pending_days=%s, adjusted_days=%s, carried_over_days=%s
                WHERE balance_id=%s
                """,
                (
                    balance.total_days,
                    balance.used_days,
                    balance.pending_days,
                    balance.adjusted_days,
                    balance.carried_over_days,
                    balance.balance_id,
                ),
            )
            return cur.rowcount >= 0
