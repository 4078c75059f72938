from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date, week_start as monday_of
from ..common.http import arg_date, arg_int, current_company_id, json_body, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.weekly_schedule_service

    @app.route("/api/weekly-schedules", methods=["GET"], endpoint="weekly_schedules_list")
    def weekly_schedules_list():
        week = arg_date("week_start", required=True)
        rows = service.list_week(company_id=current_company_id(), week_start=week, employee_id=arg_int("employee_id"))
        return ok(rows)

    @app.route("/api/weekly-schedules", methods=["POST"], endpoint="weekly_schedules_upsert")
    def weekly_schedules_upsert():
        body = json_body()
        if "employee_id" not in body or "week_start" not in body or "day_of_week" not in body:
            raise ValidationError("employee_id, week_start and day_of_week are required")
        schedule_id = body.get("schedule_id")
        assignment = service.upsert(
            company_id=current_company_id(),
            employee_id=int(body["employee_id"]),
            week_start=parse_iso_date(str(body["week_start"])),
            day_of_week=body["day_of_week"],
            schedule_id=int(schedule_id) if schedule_id not in (None, "") else None,
            notes=body.get("notes"),
        )
        return ok(assignment, "Weekly schedule saved", 201)

    @app.route("/api/weekly-schedules/<int:assignment_id>", methods=["DELETE"], endpoint="weekly_schedules_delete")
    def weekly_schedules_delete(assignment_id: int):
        service.delete(company_id=current_company_id(), assignment_id=assignment_id)
        return ok(None, "Weekly schedule deleted")

    @app.route("/api/weekly-schedules/copy", methods=["POST"], endpoint="weekly_schedules_copy")
    def weekly_schedules_copy():
        body = json_body()
        copied = service.copy_week(
            company_id=current_company_id(),
            source_week=parse_iso_date(str(body.get("source_week", ""))),
            target_week=parse_iso_date(str(body.get("target_week", ""))),
            employee_ids=body.get("employee_ids"),
        )
        return ok({"copied": copied}, f"{copied} assignments copied")

    @app.route("/api/weekly-schedules/summary", methods=["GET"], endpoint="weekly_schedules_summary")
    def weekly_schedules_summary():
        week = arg_date("week_start", required=True)
        summary = service.weekly_hours_summary(
            company_id=current_company_id(),
            week_start=week,
            employee_id=arg_int("employee_id"),
        )
        return ok(summary)

    @app.route("/api/weekly-schedules/for-date", methods=["GET"], endpoint="weekly_schedules_for_date")
    def weekly_schedules_for_date():
        employee_id = arg_int("employee_id")
        if employee_id is None:
            raise ValidationError("employee_id is required")
        day = arg_date("date", required=True)
        return ok(
            {
                "week_start": monday_of(day),
                **service.for_date_summary(company_id=current_company_id(), employee_id=employee_id, day=day),
            }
        )
