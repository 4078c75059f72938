from __future__ import annotations

from flask import Flask

from ..common.http import arg_bool, current_company_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    def employees_list():
        employees = container.employee_service.list(
            company_id=current_company_id(),
            active_only=arg_bool("active_only"),
        )
        return ok(employees)

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    def employees_create():
        body = json_body()
        employee = container.employee_service.create(
            company_id=current_company_id(),
            name=body.get("name", ""),
            surname=body.get("surname"),
            dni=body.get("dni", ""),
            pin=str(body.get("pin", "")),
            email=body.get("email"),
        )
        return ok(employee, "Employee created", 201)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    def employees_get(employee_id: int):
        return ok(container.employee_service.get(company_id=current_company_id(), employee_id=employee_id))

    @app.route("/api/employees/<int:employee_id>/active", methods=["PUT"], endpoint="employees_set_active")
    def employees_set_active(employee_id: int):
        body = json_body()
        employee = container.employee_service.set_active(
            company_id=current_company_id(),
            employee_id=employee_id,
            active=bool(body.get("active", True)),
        )
        return ok(employee, "Employee updated")
