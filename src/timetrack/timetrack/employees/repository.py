from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def list_for_company(
        self,
        company_id: int,
        *,
        active_only: bool = False,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def get_for_company(self, company_id: int, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_dni(self, company_id: int, dni: str) -> Optional[Employee]:
        raise NotImplementedError

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
        """Create the employee and link it to the company. Returns employee_id."""

        raise NotImplementedError

    def set_active(self, company_id: int, employee_id: int, active: bool) -> bool:
        raise NotImplementedError
