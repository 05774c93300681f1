from __future__ import annotations

from flask import Flask

from ..common.http import as_date, current_identity, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.salary_history_service

    @app.route("/api/employees/<int:user_id>/salary", methods=["GET"], endpoint="salary_overview")
    def overview(user_id: int):
        caller_id, role = current_identity()
        container.employee_service.get_for_caller(current_role=role, caller_id=caller_id, user_id=user_id)
        return ok({"current": service.current_effective(user_id), "pending": service.pending(user_id)})

    @app.route("/api/employees/<int:user_id>/salary/history", methods=["GET"], endpoint="salary_history")
    def history(user_id: int):
        caller_id, role = current_identity()
        container.employee_service.get_for_caller(current_role=role, caller_id=caller_id, user_id=user_id)
        return ok(service.history(user_id))

    @app.route("/api/employees/<int:user_id>/salary", methods=["POST"], endpoint="salary_change")
    def record_change(user_id: int):
        caller_id, role = current_identity()
        data = json_body()
        entry = service.record_change(
            current_role=role,
            user_id=user_id,
            new_base_salary=required(data, "base_salary"),
            new_working_days=required(data, "working_days"),
            new_daily_hours=required(data, "daily_hours"),
            changed_by=caller_id,
            reason=data.get("reason"),
            notes=data.get("notes"),
            effective_from=as_date(data.get("effective_from"), "effective_from"),
        )
        return ok(entry, 201)

    @app.route("/api/salary/history/<int:entry_id>/notes", methods=["PUT"], endpoint="salary_history_notes")
    def update_notes(entry_id: int):
        _, role = current_identity()
        data = json_body()
        return ok(service.update_notes(current_role=role, entry_id=entry_id, notes=data.get("notes")))

    @app.route("/api/salary/history/<int:entry_id>", methods=["DELETE"], endpoint="salary_history_delete")
    def delete_pending(entry_id: int):
        _, role = current_identity()
        service.delete_pending(current_role=role, entry_id=entry_id)
        return ok()
