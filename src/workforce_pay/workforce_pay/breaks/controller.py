from __future__ import annotations

from flask import Flask

from ..common.http import as_datetime, as_int, current_identity, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/breaks/requests", methods=["POST"], endpoint="break_request_create")
    def create_request():
        user_id, _ = current_identity()
        data = json_body()
        request_id = container.break_service.create_request(
            user_id=user_id,
            attendance_id=as_int(required(data, "attendance_id"), "attendance_id"),
            requested_start=as_datetime(data.get("requested_start"), "requested_start"),
            requested_end=as_datetime(data.get("requested_end"), "requested_end"),
            reason=data.get("reason"),
        )
        return ok({"request_id": request_id}, 201)

    @app.route("/api/breaks/requests/mine", methods=["GET"], endpoint="break_request_mine")
    def my_requests():
        user_id, _ = current_identity()
        return ok(container.break_service.list_for_user(user_id))

    @app.route("/api/breaks/requests/pending", methods=["GET"], endpoint="break_request_pending")
    def pending():
        _, role = current_identity()
        return ok(container.break_service.list_pending(current_role=role))

    @app.route("/api/breaks/requests/<int:request_id>/cancel", methods=["POST"], endpoint="break_request_cancel")
    def cancel(request_id: int):
        user_id, _ = current_identity()
        container.break_service.cancel(user_id=user_id, request_id=request_id)
        return ok()

    @app.route("/api/breaks/requests/<int:request_id>", methods=["DELETE"], endpoint="break_request_delete")
    def delete(request_id: int):
        user_id, role = current_identity()
        container.break_service.delete(current_role=role, user_id=user_id, request_id=request_id)
        return ok()

    @app.route("/api/breaks/requests/<int:request_id>/approve", methods=["POST"], endpoint="break_request_approve")
    def approve(request_id: int):
        reviewer_id, role = current_identity()
        data = json_body()
        req = container.break_service.approve(
            current_role=role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            approved_start=as_datetime(required(data, "approved_start"), "approved_start"),
            approved_end=as_datetime(required(data, "approved_end"), "approved_end"),
            notes=data.get("notes"),
        )
        return ok(req)

    @app.route("/api/breaks/requests/<int:request_id>/reject", methods=["POST"], endpoint="break_request_reject")
    def reject(request_id: int):
        reviewer_id, role = current_identity()
        data = json_body()
        container.break_service.reject(
            current_role=role, reviewer_id=reviewer_id, request_id=request_id, notes=data.get("notes")
        )
        return ok()

    @app.route("/api/breaks/requests/<int:request_id>", methods=["PUT"], endpoint="break_request_edit")
    def edit(request_id: int):
        editor_id, role = current_identity()
        data = json_body()
        req = container.break_service.edit_approved(
            current_role=role,
            editor_id=editor_id,
            request_id=request_id,
            approved_start=as_datetime(required(data, "approved_start"), "approved_start"),
            approved_end=as_datetime(required(data, "approved_end"), "approved_end"),
            notes=data.get("notes"),
        )
        return ok(req)

    @app.route("/api/breaks/assign", methods=["POST"], endpoint="break_assign")
    def assign():
        hr_id, role = current_identity()
        data = json_body()
        request_id = container.break_service.assign_by_hr(
            current_role=role,
            assigned_by=hr_id,
            user_id=as_int(required(data, "user_id"), "user_id"),
            attendance_id=as_int(required(data, "attendance_id"), "attendance_id"),
            start=as_datetime(required(data, "start"), "start"),
            end=as_datetime(required(data, "end"), "end"),
            notes=data.get("notes"),
        )
        return ok({"request_id": request_id}, 201)
