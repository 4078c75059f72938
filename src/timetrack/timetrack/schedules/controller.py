from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import arg_bool, current_company_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    def schedules_list():
        return ok(service.list(company_id=current_company_id(), active_only=arg_bool("active_only")))

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    def schedules_create():
        body = json_body()
        schedule = service.create(
            company_id=current_company_id(),
            name=body.get("name", ""),
            start_time=body.get("start_time", ""),
            end_time=body.get("end_time", ""),
            break_minutes=body.get("break_minutes", 0),
            is_flexible=bool(body.get("is_flexible", False)),
            color=body.get("color"),
        )
        return ok(schedule, "Schedule created", 201)

    @app.route("/api/schedules/<int:schedule_id>", methods=["GET"], endpoint="schedules_get")
    def schedules_get(schedule_id: int):
        schedule = service.get(company_id=current_company_id(), schedule_id=schedule_id)
        return ok({"schedule": schedule, "is_overnight": schedule.is_overnight, "net_minutes": schedule.net_minutes})

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT"], endpoint="schedules_update")
    def schedules_update(schedule_id: int):
        schedule = service.update(company_id=current_company_id(), schedule_id=schedule_id, changes=json_body())
        return ok(schedule, "Schedule updated")

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    def schedules_delete(schedule_id: int):
        service.delete(company_id=current_company_id(), schedule_id=schedule_id, force=arg_bool("force"))
        return ok(None, "Schedule deleted")

    @app.route("/api/schedules/<int:schedule_id>/assign", methods=["POST"], endpoint="schedules_assign")
    def schedules_assign(schedule_id: int):
        body = json_body()
        start_raw = body.get("start_date")
        end_raw = body.get("end_date")
        ids = service.assign(
            company_id=current_company_id(),
            schedule_id=schedule_id,
            employee_ids=body.get("employee_ids") or [],
            start_date=parse_iso_date(start_raw) if start_raw else date.today(),
            end_date=parse_iso_date(end_raw) if end_raw else None,
        )
        return ok({"assignment_ids": ids}, "Schedule assigned", 201)

    @app.route(
        "/api/schedules/<int:schedule_id>/employees/<int:employee_id>",
        methods=["DELETE"],
        endpoint="schedules_unassign",
    )
    def schedules_unassign(schedule_id: int, employee_id: int):
        service.unassign(company_id=current_company_id(), schedule_id=schedule_id, employee_id=employee_id)
        return ok(None, "Assignment removed")

    @app.route("/api/employees/<int:employee_id>/schedules", methods=["GET"], endpoint="employee_schedules_list")
    def employee_schedules_list(employee_id: int):
        return ok(service.employee_schedules(company_id=current_company_id(), employee_id=employee_id))
