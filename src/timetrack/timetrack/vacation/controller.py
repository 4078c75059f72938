from __future__ import annotations

from flask import Flask

from ..common.http import arg_bool, arg_int, current_company_id, json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_MAX_CARRY_OVER_DAYS, DEFAULT_MIN_NOTICE_DAYS, DEFAULT_VACATION_DAYS


def _balance_payload(balance) -> dict:
    return {**vars(balance), "available_days": balance.available_days}


def register(app: Flask, container: Container) -> None:
    service = container.vacation_service

    @app.route("/api/vacation-policies", methods=["GET"], endpoint="vacation_policies_list")
    def vacation_policies_list():
        return ok(service.list_policies(company_id=current_company_id(), active_only=arg_bool("active_only")))

    @app.route("/api/vacation-policies", methods=["POST"], endpoint="vacation_policies_create")
    def vacation_policies_create():
        body = json_body()
        policy = service.create_policy(
            company_id=current_company_id(),
            name=body.get("name", ""),
            yearly_days=body.get("yearly_days", DEFAULT_VACATION_DAYS),
            max_carry_over_days=body.get("max_carry_over_days", DEFAULT_MAX_CARRY_OVER_DAYS),
            min_notice_days=body.get("min_notice_days", DEFAULT_MIN_NOTICE_DAYS),
            allow_half_days=bool(body.get("allow_half_days", True)),
        )
        return ok(policy, "Vacation policy created", 201)

    @app.route("/api/vacation-policies/<int:policy_id>", methods=["PUT"], endpoint="vacation_policies_update")
    def vacation_policies_update(policy_id: int):
        policy = service.update_policy(company_id=current_company_id(), policy_id=policy_id, changes=json_body())
        return ok(policy, "Vacation policy updated")

    @app.route("/api/vacation-policies/<int:policy_id>", methods=["DELETE"], endpoint="vacation_policies_delete")
    def vacation_policies_delete(policy_id: int):
        service.delete_policy(company_id=current_company_id(), policy_id=policy_id)
        return ok(None, "Vacation policy deactivated")

    @app.route("/api/vacation-balances/<int:employee_id>", methods=["GET"], endpoint="vacation_balances_get")
    def vacation_balances_get(employee_id: int):
        balance = service.get_balance(company_id=current_company_id(), employee_id=employee_id, year=arg_int("year"))
        return ok(_balance_payload(balance))

    @app.route(
        "/api/vacation-balances/<int:employee_id>/initialize",
        methods=["POST"],
        endpoint="vacation_balances_initialize",
    )
    def vacation_balances_initialize(employee_id: int):
        body = json_body()
        balance = service.initialize_balance(
            company_id=current_company_id(),
            employee_id=employee_id,
            year=body.get("year"),
            policy_id=body.get("policy_id"),
        )
        return ok(_balance_payload(balance), "Vacation balance initialized", 201)

    @app.route("/api/vacation-balances/<int:employee_id>/adjust", methods=["POST"], endpoint="vacation_balances_adjust")
    def vacation_balances_adjust(employee_id: int):
        body = json_body()
        balance = service.adjust(
            company_id=current_company_id(),
            employee_id=employee_id,
            field=body.get("field", "adjusted"),
            days=body.get("days"),
            year=body.get("year"),
        )
        return ok(_balance_payload(balance), "Vacation balance adjusted")
