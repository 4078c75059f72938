from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_date, arg_int_list, current_company_id, ok
from ..container import Container
from ..core.enums import ReportType


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _filters():
        return service.filters(
            company_id=current_company_id(),
            start_date=arg_date("start_date", required=True),
            end_date=arg_date("end_date", required=True),
            employee_ids=arg_int_list("employee_ids"),
            group_by=request.args.get("group_by"),
        )

    def _add_report_route(report_type: ReportType) -> None:
        endpoint = "reports_" + report_type.value.replace("-", "_")

        def view():
            return ok(service.build(report_type, _filters()))

        app.add_url_rule(f"/api/reports/{report_type.value}", endpoint=endpoint, view_func=view, methods=["GET"])

    for report_type in ReportType:
        _add_report_route(report_type)

    @app.route("/api/reports/options", methods=["GET"], endpoint="reports_options")
    def reports_options():
        return ok(service.options())
