from __future__ import annotations

from ..core.constants import DEFAULT_UTC_OFFSET_MINUTES
from ..core.exceptions import NotFoundError, ValidationError
from .model import Company
from .repository import CompanyRepository


class CompanyService:
    """Read side of company settings shared by the other services."""

    def __init__(self, companies: CompanyRepository, *, default_utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES):
        self._companies = companies
        self._default_offset = int(default_utc_offset_minutes)

    def get(self, company_id: int) -> Company:
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("Company not found")
        if not company.active:
            raise ValidationError("Company is inactive")
        return company

    def offset_minutes(self, company_id: int) -> int:
        return self.get(company_id).offset_minutes(self._default_offset)

    def offset_for(self, company: Company) -> int:
        return company.offset_minutes(self._default_offset)

    def list_active(self) -> list[Company]:
        return list(self._companies.list_active())
