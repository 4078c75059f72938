from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import arg_int, arg_int_list, current_company_id, json_body, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.time_entry_service

    def _punch_options(body: dict) -> dict:
        return {
            "latitude": body.get("latitude"),
            "longitude": body.get("longitude"),
            "location": body.get("location"),
            "is_remote_work": bool(body.get("is_remote_work", False)),
            "device_info": body.get("device_info") or request.headers.get("User-Agent"),
            "notes": body.get("notes"),
            "break_type_id": body.get("break_type_id"),
            "break_reason": body.get("break_reason"),
        }

    @app.route("/api/time-entries", methods=["GET"], endpoint="time_entries_list")
    def time_entries_list():
        start_raw = request.args.get("start")
        end_raw = request.args.get("end")
        page = service.list(
            company_id=current_company_id(),
            employee_id=arg_int("employee_id"),
            start=parse_iso_datetime(start_raw) if start_raw else None,
            end=parse_iso_datetime(end_raw) if end_raw else None,
            entry_type=request.args.get("type"),
            source=request.args.get("source"),
            page=arg_int("page") or 1,
            limit=arg_int("limit") or 20,
        )
        return ok(page)

    @app.route("/api/time-entries", methods=["POST"], endpoint="time_entries_punch")
    def time_entries_punch():
        body = json_body()
        if not body.get("employee_id"):
            raise ValidationError("employee_id is required")
        entry = service.punch(
            company_id=current_company_id(),
            employee_id=int(body["employee_id"]),
            entry_type=body.get("type", ""),
            source=body.get("source") or "WEB",
            **_punch_options(body),
        )
        return ok(entry, "Punch recorded", 201)

    @app.route("/api/time-entries/kiosk", methods=["POST"], endpoint="time_entries_kiosk")
    def time_entries_kiosk():
        body = json_body()
        entry = service.kiosk_punch(
            company_id=current_company_id(),
            dni=str(body.get("dni", "")),
            pin=str(body.get("pin", "")),
            entry_type=body.get("type", ""),
            device_info=body.get("device_info"),
            break_type_id=body.get("break_type_id"),
            break_reason=body.get("break_reason"),
        )
        return ok(entry, "Punch recorded", 201)

    @app.route("/api/time-entries/bulk", methods=["POST"], endpoint="time_entries_bulk")
    def time_entries_bulk():
        body = json_body()
        entries = service.bulk_create(company_id=current_company_id(), items=body.get("entries") or [])
        return ok(entries, f"{len(entries)} entries created", 201)

    @app.route("/api/time-entries/state/<int:employee_id>", methods=["GET"], endpoint="time_entries_state")
    def time_entries_state(employee_id: int):
        state = service.current_state(company_id=current_company_id(), employee_id=employee_id)
        return ok(
            {
                **vars(state),
                "is_working": state.is_working,
                "on_break": state.on_break,
            }
        )

    @app.route("/api/time-entries/daily-summary", methods=["GET"], endpoint="time_entries_daily_summary")
    def time_entries_daily_summary():
        raw = request.args.get("date")
        if not raw:
            raise ValidationError("date is required")
        rows = service.daily_summary(
            company_id=current_company_id(),
            day=parse_iso_date(raw),
            employee_ids=arg_int_list("employee_ids"),
        )
        return ok(rows)

    @app.route("/api/time-entries/<int:entry_id>", methods=["GET"], endpoint="time_entries_get")
    def time_entries_get(entry_id: int):
        return ok(service.get(company_id=current_company_id(), entry_id=entry_id))

    @app.route("/api/time-entries/<int:entry_id>", methods=["PUT"], endpoint="time_entries_update")
    def time_entries_update(entry_id: int):
        body = dict(json_body())
        reason = body.pop("reason", "")
        edited_by = body.pop("edited_by", None)
        if "type" in body:
            body["entry_type"] = body.pop("type")
        entry = service.update(
            company_id=current_company_id(),
            entry_id=entry_id,
            changes=body,
            reason=reason,
            edited_by=edited_by,
        )
        return ok(entry, "Time entry updated")

    @app.route("/api/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="time_entries_delete")
    def time_entries_delete(entry_id: int):
        body = json_body()
        service.delete(
            company_id=current_company_id(),
            entry_id=entry_id,
            reason=body.get("reason") or request.args.get("reason", ""),
            edited_by=body.get("edited_by"),
        )
        return ok(None, "Time entry deleted")
