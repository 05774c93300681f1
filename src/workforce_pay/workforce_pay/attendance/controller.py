from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import as_date, as_datetime, as_int, current_identity, json_body, ok, required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        user_id, _ = current_identity()
        data = request.get_json(silent=True) or {}
        attendance_id = container.attendance_service.check_in(
            user_id,
            current_ssid=data.get("current_ssid"),
            notes=data.get("notes"),
        )
        return ok({"attendance_id": attendance_id}, 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def check_out():
        user_id, _ = current_identity()
        data = request.get_json(silent=True) or {}
        record = container.attendance_service.check_out(user_id, notes=data.get("notes"))
        return ok(record)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def today():
        user_id, _ = current_identity()
        return ok(container.attendance_service.get_today_record(user_id, now_local().date()))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    def history():
        user_id, _ = current_identity()
        limit = as_int(request.args.get("limit", 30), "limit")
        return ok(container.attendance_service.get_history_ui(user_id, limit=limit))

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    def summary():
        user_id, _ = current_identity()
        today = now_local().date()
        year = as_int(request.args.get("year", today.year), "year")
        month = as_int(request.args.get("month", today.month), "month")
        return ok(container.attendance_service.monthly_summary(user_id, year=year, month=month))

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    def mark():
        caller_id, role = current_identity()
        data = json_body()
        attendance_id = container.attendance_service.mark_attendance(
            current_role=role,
            marked_by=caller_id,
            user_id=as_int(required(data, "user_id"), "user_id"),
            work_date=as_date(required(data, "work_date"), "work_date"),
            check_in_time=as_datetime(required(data, "check_in_time"), "check_in_time"),
            check_out_time=as_datetime(data.get("check_out_time"), "check_out_time"),
            notes=data.get("notes"),
        )
        return ok({"attendance_id": attendance_id})

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_detail")
    def detail(attendance_id: int):
        caller_id, role = current_identity()
        record = container.attendance_service.get_record(attendance_id)
        container.employee_service.get_for_caller(current_role=role, caller_id=caller_id, user_id=record.user_id)
        return ok(record)

    @app.route("/api/attendance/<int:attendance_id>/break-requests", methods=["GET"], endpoint="attendance_break_requests")
    def break_requests(attendance_id: int):
        caller_id, role = current_identity()
        record = container.attendance_service.get_record(attendance_id)
        container.employee_service.get_for_caller(current_role=role, caller_id=caller_id, user_id=record.user_id)
        return ok(container.break_service.list_for_record(attendance_id))
