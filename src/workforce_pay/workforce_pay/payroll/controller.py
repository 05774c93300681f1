from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import today_local
from ..common.http import as_date, as_float, as_int, current_identity, json_body, ok, required
from ..common.validators import require_hr
from ..container import Container
from ..core.enums import SalaryStatus
from ..core.exceptions import ValidationError


def _period() -> tuple[int, int]:
    today = today_local()
    return (
        as_int(request.args.get("year", today.year), "year"),
        as_int(request.args.get("month", today.month), "month"),
    )


def register(app: Flask, container: Container) -> None:
    earnings = container.earnings_service
    slips = container.salary_slip_service

    @app.route("/api/employees/<int:user_id>/earnings", methods=["GET"], endpoint="employee_earnings")
    def monthly_earnings(user_id: int):
        caller_id, role = current_identity()
        container.employee_service.get_for_caller(current_role=role, caller_id=caller_id, user_id=user_id)
        year, month = _period()
        return ok(earnings.monthly_earnings(user_id, year, month))

    @app.route("/api/organizations/<int:organization_id>/earnings", methods=["GET"], endpoint="organization_earnings")
    def organization_stats(organization_id: int):
        _, role = current_identity()
        require_hr(role)
        year, month = _period()
        return ok(earnings.organization_stats(organization_id, year, month))

    @app.route("/api/salary-slips", methods=["POST"], endpoint="salary_slip_create")
    def create_slip():
        caller_id, role = current_identity()
        data = json_body()
        slip = slips.create_draft(
            current_role=role,
            created_by=caller_id,
            user_id=as_int(required(data, "user_id"), "user_id"),
            year=as_int(required(data, "year"), "year"),
            month=as_int(required(data, "month"), "month"),
            allowances=as_float(data.get("allowances"), "allowances"),
            deductions=as_float(data.get("deductions"), "deductions"),
            bonus=as_float(data.get("bonus"), "bonus"),
            notes=data.get("notes"),
        )
        return ok(slip, 201)

    @app.route("/api/salary-slips/<int:slip_id>", methods=["PUT"], endpoint="salary_slip_update")
    def update_slip(slip_id: int):
        _, role = current_identity()
        data = json_body()
        slip = slips.update_draft(
            current_role=role,
            slip_id=slip_id,
            allowances=as_float(data.get("allowances"), "allowances"),
            deductions=as_float(data.get("deductions"), "deductions"),
            bonus=as_float(data.get("bonus"), "bonus"),
            notes=data.get("notes"),
        )
        return ok(slip)

    @app.route("/api/salary-slips/<int:slip_id>/status", methods=["POST"], endpoint="salary_slip_status")
    def advance_status(slip_id: int):
        caller_id, role = current_identity()
        data = json_body()
        try:
            status = SalaryStatus(str(required(data, "status")).lower())
        except ValueError as exc:
            raise ValidationError("Unknown salary status") from exc
        slip = slips.advance_status(
            current_role=role,
            actor_id=caller_id,
            slip_id=slip_id,
            status=status,
            payment_date=as_date(data.get("payment_date"), "payment_date"),
        )
        return ok(slip)

    @app.route("/api/salary-slips/<int:slip_id>", methods=["DELETE"], endpoint="salary_slip_delete")
    def delete_slip(slip_id: int):
        _, role = current_identity()
        slips.delete_draft(current_role=role, slip_id=slip_id)
        return ok()

    @app.route("/api/salary-slips/mine", methods=["GET"], endpoint="salary_slip_mine")
    def my_slips():
        user_id, _ = current_identity()
        return ok(slips.list_for_user(user_id))

    @app.route("/api/salary-slips", methods=["GET"], endpoint="salary_slip_month")
    def month_slips():
        _, role = current_identity()
        year, month = _period()
        return ok(slips.list_for_month(current_role=role, year=year, month=month))

    @app.route("/api/earnings/current", methods=["GET"], endpoint="earnings_current")
    def current_earnings():
        user_id, _ = current_identity()
        return ok(earnings.current_month_earnings(user_id))
