from __future__ import annotations

from flask import Flask

from ..common.http import arg_int, current_company_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    def holidays_list():
        return ok(service.list(company_id=current_company_id(), year=arg_int("year")))

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    def holidays_create():
        body = json_body()
        holiday = service.create(
            company_id=current_company_id(),
            holiday_date=body.get("date") or body.get("holiday_date"),
            name=body.get("name", ""),
            is_recurring=bool(body.get("is_recurring", False)),
        )
        return ok(holiday, "Holiday created", 201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="holidays_update")
    def holidays_update(holiday_id: int):
        changes = dict(json_body())
        if "date" in changes:
            changes["holiday_date"] = changes.pop("date")
        holiday = service.update(company_id=current_company_id(), holiday_id=holiday_id, changes=changes)
        return ok(holiday, "Holiday updated")

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    def holidays_delete(holiday_id: int):
        service.delete(company_id=current_company_id(), holiday_id=holiday_id)
        return ok(None, "Holiday deleted")
