from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_days, require_enum, require_min_length, require_non_empty, require_non_negative_int
from ..core.constants import (
    DEFAULT_MAX_CARRY_OVER_DAYS,
    DEFAULT_MIN_NOTICE_DAYS,
    DEFAULT_VACATION_DAYS,
    DEFAULT_VACATION_POLICY_NAME,
)
from ..core.enums import BalanceField
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.service import EmployeeService
from .model import VacationBalance, VacationPolicy
from .repository import VacationRepository

logger = logging.getLogger(__name__)


class VacationService:
    """Vacation policies and the per-year balance ledger of each employee."""

    def __init__(self, vacation: VacationRepository, employees: EmployeeService):
        self._vacation = vacation
        self._employees = employees

    # Policies

    def list_policies(self, *, company_id: int, active_only: bool = False) -> list[VacationPolicy]:
        return list(self._vacation.list_policies(int(company_id), active_only=active_only))

    def get_policy(self, *, company_id: int, policy_id: int) -> VacationPolicy:
        policy = self._vacation.get_policy(int(company_id), int(policy_id))
        if not policy:
            raise NotFoundError("Vacation policy not found")
        return policy

    def create_policy(
        self,
        *,
        company_id: int,
        name: str,
        yearly_days=DEFAULT_VACATION_DAYS,
        max_carry_over_days=DEFAULT_MAX_CARRY_OVER_DAYS,
        min_notice_days=DEFAULT_MIN_NOTICE_DAYS,
        allow_half_days: bool = True,
    ) -> VacationPolicy:
        policy_id = self._vacation.create_policy(
            company_id=int(company_id),
            name=require_min_length(require_non_empty(name, "Name"), "Name", 2),
            yearly_days=require_days(yearly_days, "Yearly days"),
            max_carry_over_days=require_days(max_carry_over_days, "Maximum carry-over days"),
            min_notice_days=require_non_negative_int(min_notice_days, "Minimum notice days"),
            allow_half_days=bool(allow_half_days),
        )
        return self.get_policy(company_id=company_id, policy_id=policy_id)

    def update_policy(self, *, company_id: int, policy_id: int, changes: dict) -> VacationPolicy:
        updated = self.get_policy(company_id=company_id, policy_id=policy_id)
        if "name" in changes:
            updated = replace(updated, name=require_min_length(require_non_empty(changes["name"], "Name"), "Name", 2))
        if "yearly_days" in changes:
            updated = replace(updated, yearly_days=require_days(changes["yearly_days"], "Yearly days"))
        if "max_carry_over_days" in changes:
            updated = replace(
                updated, max_carry_over_days=require_days(changes["max_carry_over_days"], "Maximum carry-over days")
            )
        if "min_notice_days" in changes:
            updated = replace(
                updated, min_notice_days=require_non_negative_int(changes["min_notice_days"], "Minimum notice days")
            )
        if "allow_half_days" in changes:
            updated = replace(updated, allow_half_days=bool(changes["allow_half_days"]))
        if "active" in changes:
            updated = replace(updated, active=bool(changes["active"]))

        self._vacation.update_policy(updated)
        return updated

    def delete_policy(self, *, company_id: int, policy_id: int) -> None:
        # Balances keep their policy_id, so policies are only switched off.
        policy = self.get_policy(company_id=company_id, policy_id=policy_id)
        self._vacation.update_policy(replace(policy, active=False))
        logger.info("Deactivated vacation policy %s of company %s", policy_id, company_id)

    def active_policy(self, *, company_id: int) -> VacationPolicy:
        """The company's first active policy, creating the default one when there is none."""
        policies = self._vacation.list_policies(int(company_id), active_only=True)
        if policies:
            return policies[0]

        logger.info("Company %s has no vacation policy; creating the default one", company_id)
        return self.create_policy(company_id=company_id, name=DEFAULT_VACATION_POLICY_NAME)

    # Balances

    def initialize_balance(
        self,
        *,
        company_id: int,
        employee_id: int,
        year: Optional[int] = None,
        policy_id: Optional[int] = None,
    ) -> VacationBalance:
        year = int(year) if year else now_utc().year
        self._employees.get(company_id=company_id, employee_id=employee_id)
        existing = self._vacation.get_balance(int(company_id), int(employee_id), int(year))
        if existing:
            return existing

        if policy_id is not None:
            policy = self.get_policy(company_id=company_id, policy_id=policy_id)
        else:
            policy = self.active_policy(company_id=company_id)

        carried_over = 0.0
        previous = self._vacation.get_balance(int(company_id), int(employee_id), int(year) - 1)
        if previous and policy.max_carry_over_days > 0:
            carried_over = max(0.0, min(previous.remaining_after_use, policy.max_carry_over_days))

        self._vacation.create_balance(
            company_id=int(company_id),
            employee_id=int(employee_id),
            policy_id=policy.policy_id,
            year=int(year),
            total_days=policy.yearly_days + carried_over,
            carried_over_days=carried_over,
        )
        logger.info(
            "Initialized %s vacation balance for employee %s: %.1f days (%.1f carried over)",
            year,
            employee_id,
            policy.yearly_days + carried_over,
            carried_over,
        )
        return self._vacation.get_balance(int(company_id), int(employee_id), int(year))

    def get_balance(self, *, company_id: int, employee_id: int, year: Optional[int] = None) -> VacationBalance:
        """Read a balance, creating it on first access only when the company has an active policy."""
        year = int(year) if year else now_utc().year
        self._employees.get(company_id=company_id, employee_id=employee_id)
        balance = self._vacation.get_balance(int(company_id), int(employee_id), year)
        if balance:
            return balance
        if not self._vacation.list_policies(int(company_id), active_only=True):
            raise NotFoundError("No vacation balance: the company has no active vacation policy")
        return self.initialize_balance(company_id=company_id, employee_id=employee_id, year=year)

    def adjust(
        self,
        *,
        company_id: int,
        employee_id: int,
        field,
        days,
        year: Optional[int] = None,
    ) -> VacationBalance:
        """Add ``days`` (may be negative) to one balance counter."""
        field = require_enum(BalanceField, field, "Field")
        days = require_days(days, "Days", allow_negative=True)
        # Writes may create the default policy, reads may not
        balance = self.initialize_balance(company_id=company_id, employee_id=employee_id, year=year)

        if field == BalanceField.USED:
            updated = replace(balance, used_days=balance.used_days + days)
        elif field == BalanceField.PENDING:
            updated = replace(balance, pending_days=balance.pending_days + days)
        else:
            updated = replace(balance, adjusted_days=balance.adjusted_days + days)

        if updated.used_days < 0 or updated.pending_days < 0:
            raise ValidationError("Vacation balance counters cannot go below zero")

        self._vacation.update_balance(updated)
        logger.info("Adjusted %s vacation days of employee %s by %+.1f", field.value, employee_id, days)
        return updated

    def move_pending(self, *, company_id: int, employee_id: int, year: int, days: float, to_used: bool) -> VacationBalance:
        """Release ``days`` from pending after a decision, counting them as used when approved."""
        balance = self.initialize_balance(company_id=company_id, employee_id=employee_id, year=year)
        updated = replace(
            balance,
            pending_days=max(0.0, balance.pending_days - days),
            used_days=balance.used_days + days if to_used else balance.used_days,
        )
        self._vacation.update_balance(updated)
        return updated
