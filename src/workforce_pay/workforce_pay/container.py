from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .breaks.mysql_break_request_repository import MySQLBreakRequestRepository
from .breaks.service import BreakRequestService
from .core.constants import DEFAULT_LEAVE_ALLOWANCES, DEFAULT_MINIMUM_VALID_HOURS
from .core.enums import LeaveType
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import MySQLTransactionManager
from .leave.mysql_leave_repository import MySQLLeaveRequestRepository
from .leave.service import LeaveService
from .payroll.mysql_salary_slip_repository import MySQLSalarySlipRepository
from .payroll.service import EarningsService, SalarySlipService
from .salary_history.mysql_salary_history_repository import MySQLSalaryHistoryRepository
from .salary_history.service import SalaryHistoryService
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.service import EmployeeService
from .wifi.mysql_wifi_repository import MySQLOfficeNetworkRepository
from .wifi.service import WiFiNetworkService


@dataclass(frozen=True)
class Container:
    employee_service: EmployeeService
    attendance_service: AttendanceService
    break_service: BreakRequestService
    salary_history_service: SalaryHistoryService
    earnings_service: EarningsService
    salary_slip_service: SalarySlipService
    wifi_service: WiFiNetworkService
    leave_service: LeaveService


def _leave_allowances(overrides: Optional[Mapping[str, int]]) -> dict[LeaveType, int]:
    allowances = dict(DEFAULT_LEAVE_ALLOWANCES)
    for key, days in (overrides or {}).items():
        allowances[LeaveType(key)] = int(days)
    return allowances


def build_container(
    *,
    db_config: dict,
    minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    leave_allowances: Optional[Mapping[str, int]] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)
    tx = MySQLTransactionManager(conn)

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    break_requests_repo = MySQLBreakRequestRepository(conn)
    history_repo = MySQLSalaryHistoryRepository(conn)
    slips_repo = MySQLSalarySlipRepository(conn)
    networks_repo = MySQLOfficeNetworkRepository(conn)
    leave_repo = MySQLLeaveRequestRepository(conn)

    earnings_service = EarningsService(attendance_repo, employees_repo, history_repo, minimum_hours=minimum_hours)

    return Container(
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(
            attendance_repo, employees_repo, networks_repo, minimum_hours=minimum_hours
        ),
        break_service=BreakRequestService(break_requests_repo, attendance_repo, tx, minimum_hours=minimum_hours),
        salary_history_service=SalaryHistoryService(history_repo, employees_repo, tx),
        earnings_service=earnings_service,
        salary_slip_service=SalarySlipService(slips_repo, earnings_service, attendance_repo),
        wifi_service=WiFiNetworkService(networks_repo, employees_repo),
        leave_service=LeaveService(leave_repo, allowances=_leave_allowances(leave_allowances)),
    )
