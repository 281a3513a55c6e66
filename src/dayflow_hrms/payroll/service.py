from __future__ import annotations

from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import date_key, now_local
from ..core.constants import UNASSIGNED_TEAM
from ..core.enums import MANAGER_ROLES, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..teams.repository import TeamRepository
from ..users.model import User
from ..users.repository import UserRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollReport, Period, SalarySlip
from .report import compute_payroll_report


def resolve_period(month=None, year=None) -> Period:
    """Month/year from query args; both missing means the current month."""
    if month in (None, "") or year in (None, ""):
        today = now_local().date()
        return Period(month=today.month, year=today.year)
    try:
        return Period(month=int(month), year=int(year))
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be integers")


class PayrollService:
    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        teams: TeamRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._users = users
        self._attendance = attendance
        self._leaves = leaves
        self._teams = teams
        self._calculator = calculator or StandardPayrollCalculator()

    def _team_names(self) -> dict[str, str]:
        return {t.id: t.team_name for t in self._teams.list_teams()}

    def _period_inputs(self, employee: User, period: Period):
        attendance = self._attendance.list_records(
            employee_id=employee.id,
            date_from=date_key(period.start),
            date_to=date_key(period.end),
        )
        leaves = self._leaves.list_leaves(
            employee_id=employee.id,
            status=RequestStatus.APPROVED,
            overlapping=(period.start, period.end),
        )
        return attendance, leaves

    def salary_slip(
        self,
        *,
        current_role: Role,
        current_employee_id: str,
        employee_code: str,
        month=None,
        year=None,
    ) -> SalarySlip:
        """Salary slip for one employee; employees may only read their own."""
        employee = self._users.get_by_employee_id(employee_code)
        if not employee:
            raise NotFoundError("Employee not found")
        if current_role not in MANAGER_ROLES and current_employee_id != employee_code:
            raise AuthorizationError("Not authorized")

        period = resolve_period(month, year)
        attendance, leaves = self._period_inputs(employee, period)
        team = None
        if employee.team_id:
            t = self._teams.get_by_id(employee.team_id)
            team = t.team_name if t else None
        return self._calculator.salary_slip(
            employee,
            period,
            attendance,
            leaves,
            team_name=team or UNASSIGNED_TEAM,
        )

    def payroll_report(
        self,
        *,
        current_role: Role,
        month=None,
        year=None,
        department: Optional[str] = None,
    ) -> PayrollReport:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized")

        period = resolve_period(month, year)
        employees = self._users.list_users(role=Role.EMPLOYEE, department=department or None)

        attendance_by_employee = {}
        leaves_by_employee = {}
        for emp in employees:
            attendance_by_employee[emp.id], leaves_by_employee[emp.id] = self._period_inputs(emp, period)

        return compute_payroll_report(
            employees,
            period.month,
            period.year,
            attendance_by_employee,
            leaves_by_employee,
            team_names=self._team_names(),
            calculator=self._calculator,
        )

    def payroll_overview(self, *, current_role: Role) -> list[dict]:
        """Configured salary structure of every employee, no attendance applied."""
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized")

        team_names = self._team_names()
        out = []
        for emp in self._users.list_users(role=Role.EMPLOYEE):
            salary = emp.salary_structure
            out.append(
                {
                    "employee_id": emp.employee_id,
                    "name": emp.full_name,
                    "department": emp.department,
                    "designation": emp.profile.designation,
                    "team": team_names.get(emp.team_id or "", UNASSIGNED_TEAM),
                    "profile_picture_url": emp.profile.profile_picture_url,
                    "gross_salary": salary.gross_salary if salary else 0,
                    "net_salary": salary.net_salary if salary else 0,
                    "salary_structure": salary.to_dict() if salary else None,
                }
            )
        return out
