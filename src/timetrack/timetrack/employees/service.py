from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import clean_optional_text, require_min_length, require_non_empty
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_PIN_RE = re.compile(r"^\d{4,6}$")


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list(
        self,
        *,
        company_id: int,
        active_only: bool = False,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> list[Employee]:
        return list(self._employees.list_for_company(company_id, active_only=active_only, employee_ids=employee_ids))

    def get(self, *, company_id: int, employee_id: int) -> Employee:
        employee = self._employees.get_for_company(int(company_id), int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def require_active(self, *, company_id: int, employee_id: int) -> Employee:
        employee = self.get(company_id=company_id, employee_id=employee_id)
        if not employee.active:
            raise ValidationError("Employee is inactive")
        return employee

    def create(
        self,
        *,
        company_id: int,
        name: str,
        surname: Optional[str],
        dni: str,
        pin: str,
        email: Optional[str] = None,
    ) -> Employee:
        name = require_min_length(require_non_empty(name, "Name"), "Name", 2)
        dni = require_non_empty(dni, "DNI").upper()
        pin = (pin or "").strip()
        if not _PIN_RE.match(pin):
            raise ValidationError("PIN must have 4 to 6 digits")

        if self._employees.get_by_dni(int(company_id), dni):
            raise ConflictError("An employee with this DNI already exists")

        employee_id = self._employees.create(
            company_id=int(company_id),
            name=name,
            surname=clean_optional_text(surname),
            dni=dni,
            email=clean_optional_text(email),
            pin_hash=generate_password_hash(pin),
        )
        logger.info("Created employee %s in company %s", employee_id, company_id)
        return self.get(company_id=company_id, employee_id=employee_id)

    def set_active(self, *, company_id: int, employee_id: int, active: bool) -> Employee:
        self.get(company_id=company_id, employee_id=employee_id)
        self._employees.set_active(int(company_id), int(employee_id), bool(active))
        return self.get(company_id=company_id, employee_id=employee_id)

    def verify_pin(self, *, company_id: int, dni: str, pin: str) -> Employee:
        employee = self._employees.get_by_dni(int(company_id), (dni or "").strip().upper())
        if not employee or not employee.active:
            raise AuthenticationError("Invalid DNI or PIN")

        try:
            ok = check_password_hash(employee.pin_hash, pin or "")
        except ValueError:
            # e.g. placeholder hashes that werkzeug cannot parse
            ok = False

        if not ok:
            raise AuthenticationError("Invalid DNI or PIN")
        return employee
