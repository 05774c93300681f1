from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import today_local
from ..common.http import as_date, as_int, current_identity, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave", methods=["POST"], endpoint="leave_create")
    def create():
        user_id, _ = current_identity()
        data = json_body()
        request_id = service.create(
            user_id=user_id,
            leave_type=required(data, "leave_type"),
            start_date=as_date(required(data, "start_date"), "start_date"),
            end_date=as_date(required(data, "end_date"), "end_date"),
            reason=required(data, "reason"),
        )
        return ok({"request_id": request_id}, 201)

    @app.route("/api/leave/<int:request_id>", methods=["PUT"], endpoint="leave_update")
    def update(request_id: int):
        user_id, _ = current_identity()
        data = json_body()
        req = service.update_pending(
            user_id=user_id,
            request_id=request_id,
            leave_type=required(data, "leave_type"),
            start_date=as_date(required(data, "start_date"), "start_date"),
            end_date=as_date(required(data, "end_date"), "end_date"),
            reason=required(data, "reason"),
        )
        return ok(req)

    @app.route("/api/leave/<int:request_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    def cancel(request_id: int):
        user_id, _ = current_identity()
        service.cancel(user_id=user_id, request_id=request_id)
        return ok()

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    def approve(request_id: int):
        reviewer_id, role = current_identity()
        data = request.get_json(silent=True) or {}
        service.approve(
            current_role=role, reviewer_id=reviewer_id, request_id=request_id, reviewer_notes=data.get("notes")
        )
        return ok()

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    def reject(request_id: int):
        reviewer_id, role = current_identity()
        data = request.get_json(silent=True) or {}
        service.reject(
            current_role=role, reviewer_id=reviewer_id, request_id=request_id, reviewer_notes=data.get("notes")
        )
        return ok()

    @app.route("/api/leave/<int:request_id>", methods=["DELETE"], endpoint="leave_delete")
    def delete(request_id: int):
        user_id, role = current_identity()
        service.delete_pending(current_role=role, user_id=user_id, request_id=request_id)
        return ok()

    @app.route("/api/leave/mine", methods=["GET"], endpoint="leave_mine")
    def mine():
        user_id, _ = current_identity()
        return ok(service.list_for_user(user_id))

    @app.route("/api/leave/pending", methods=["GET"], endpoint="leave_pending")
    def pending():
        _, role = current_identity()
        return ok(service.list_pending(current_role=role))

    @app.route("/api/leave/balance", methods=["GET"], endpoint="leave_balance")
    def balance():
        user_id, _ = current_identity()
        year = as_int(request.args.get("year", today_local().year), "year")
        return ok(service.leave_balance(user_id, year))
