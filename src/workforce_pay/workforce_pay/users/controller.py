from __future__ import annotations

from flask import Flask

from ..common.http import as_int, current_identity, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/<int:user_id>", methods=["GET"], endpoint="employee_detail")
    def employee_detail(user_id: int):
        caller_id, role = current_identity()
        employee = container.employee_service.get_for_caller(current_role=role, caller_id=caller_id, user_id=user_id)
        return ok(container.employee_service.to_ui(employee))

    @app.route("/api/organizations/<int:organization_id>/employees", methods=["GET"], endpoint="organization_employees")
    def organization_employees(organization_id: int):
        _, role = current_identity()
        employees = container.employee_service.list_for_organization(
            current_role=role, organization_id=as_int(organization_id, "organization_id")
        )
        return ok([container.employee_service.to_ui(e) for e in employees])
