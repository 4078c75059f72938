from __future__ import annotations

from flask import Flask

from ..common.http import arg_bool, current_company_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.break_type_service

    @app.route("/api/break-types", methods=["GET"], endpoint="break_types_list")
    def break_types_list():
        return ok(service.list(company_id=current_company_id(), active_only=arg_bool("active_only")))

    @app.route("/api/break-types", methods=["POST"], endpoint="break_types_create")
    def break_types_create():
        body = json_body()
        break_type = service.create(
            company_id=current_company_id(),
            name=body.get("name", ""),
            description=body.get("description"),
            color=body.get("color"),
            requires_reason=bool(body.get("requires_reason", False)),
            max_minutes=body.get("max_minutes"),
        )
        return ok(break_type, "Break type created", 201)

    @app.route("/api/break-types/<int:break_type_id>", methods=["PUT"], endpoint="break_types_update")
    def break_types_update(break_type_id: int):
        break_type = service.update(company_id=current_company_id(), break_type_id=break_type_id, changes=json_body())
        return ok(break_type, "Break type updated")

    @app.route("/api/break-types/<int:break_type_id>", methods=["DELETE"], endpoint="break_types_delete")
    def break_types_delete(break_type_id: int):
        deleted = service.delete(company_id=current_company_id(), break_type_id=break_type_id)
        return ok({"deleted": deleted}, "Break type deleted" if deleted else "Break type deactivated")
