from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_date, arg_int, current_company_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.absence_service

    @app.route("/api/absences", methods=["GET"], endpoint="absences_list")
    def absences_list():
        absences = service.list(
            company_id=current_company_id(),
            employee_id=arg_int("employee_id"),
            status=request.args.get("status"),
            absence_type=request.args.get("type"),
            start_date=arg_date("start_date"),
            end_date=arg_date("end_date"),
        )
        return ok(absences)

    @app.route("/api/absences", methods=["POST"], endpoint="absences_create")
    def absences_create():
        body = json_body()
        absence = service.create(
            company_id=current_company_id(),
            employee_id=int(body.get("employee_id") or 0),
            absence_type=body.get("type"),
            start_date=body.get("start_date"),
            end_date=body.get("end_date"),
            half_day=bool(body.get("half_day", False)),
            start_half_day=body.get("start_half_day"),
            end_half_day=body.get("end_half_day"),
            reason=body.get("reason"),
            notes=body.get("notes"),
            requested_by=body.get("requested_by"),
            approve=str(body.get("status", "")).upper() == "APPROVED",
        )
        return ok(absence, "Absence created", 201)

    @app.route("/api/absences/stats", methods=["GET"], endpoint="absences_stats")
    def absences_stats():
        stats = service.stats(
            company_id=current_company_id(),
            employee_id=arg_int("employee_id"),
            start_date=arg_date("start_date"),
            end_date=arg_date("end_date"),
        )
        return ok(stats)

    @app.route("/api/absences/<int:absence_id>", methods=["PUT"], endpoint="absences_update")
    def absences_update(absence_id: int):
        changes = dict(json_body())
        if "type" in changes:
            changes["absence_type"] = changes.pop("type")
        absence = service.update(company_id=current_company_id(), absence_id=absence_id, changes=changes)
        return ok(absence, "Absence updated")

    @app.route("/api/absences/<int:absence_id>", methods=["DELETE"], endpoint="absences_delete")
    def absences_delete(absence_id: int):
        service.delete(
            company_id=current_company_id(),
            absence_id=absence_id,
            deleted_by=json_body().get("deleted_by") or request.args.get("deleted_by"),
        )
        return ok(None, "Absence cancelled")

    @app.route("/api/absences/<int:absence_id>/approve", methods=["POST"], endpoint="absences_approve")
    def absences_approve(absence_id: int):
        absence = service.approve(
            company_id=current_company_id(),
            absence_id=absence_id,
            approved_by=json_body().get("approved_by"),
        )
        return ok(absence, "Absence approved")

    @app.route("/api/absences/<int:absence_id>/reject", methods=["POST"], endpoint="absences_reject")
    def absences_reject(absence_id: int):
        body = json_body()
        absence = service.reject(
            company_id=current_company_id(),
            absence_id=absence_id,
            rejection_reason=body.get("rejection_reason") or body.get("reason") or "",
            rejected_by=body.get("rejected_by"),
        )
        return ok(absence, "Absence rejected")
