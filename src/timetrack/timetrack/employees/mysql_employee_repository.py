from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.name, e.surname, e.dni, e.email, e.pin_hash,
           (e.active AND ec.active) AS active
    FROM employees e
    JOIN employee_companies ec ON ec.employee_id = e.employee_id
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        name=r["name"],
        surname=r.get("surname"),
        dni=r["dni"],
        email=r.get("email"),
        active=as_bool(r["active"]),
        pin_hash=r.get("pin_hash") or "",
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(
        self,
        company_id: int,
        *,
        active_only: bool = False,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[Employee]:
        clauses = ["ec.company_id=%s"]
        params: list[object] = [int(company_id)]
        if active_only:
            clauses.append("e.active=1 AND ec.active=1")
        if employee_ids is not None:
            sql, values = in_clause("e.employee_id", employee_ids)
            clauses.append(sql)
            params.extend(values)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY e.name, e.surname",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def get_for_company(self, company_id: int, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE ec.company_id=%s AND e.employee_id=%s", (int(company_id), int(employee_id)))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_dni(self, company_id: int, dni: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE ec.company_id=%s AND e.dni=%s", (int(company_id), dni))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(
        self,
        *,
        company_id: int,
        name: str,
        surname: Optional[str],
        dni: str,
        email: Optional[str],
        pin_hash: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(name, surname, dni, email, pin_hash)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, surname, dni, email, pin_hash),
            )
            employee_id = int(cur.lastrowid)
            cur.execute(
                "INSERT INTO employee_companies(employee_id, company_id) VALUES(%s,%s)",
                (employee_id, int(company_id)),
            )
            return employee_id

    def set_active(self, company_id: int, employee_id: int, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_companies SET active=%s WHERE company_id=%s AND employee_id=%s",
                (1 if active else 0, int(company_id), int(employee_id)),
            )
            return cur.rowcount > 0
