from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import UNASSIGNED_TEAM
from ..core.exceptions import DomainError
from ..leaves.model import LeaveRequest
from ..users.model import User
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollReport, PayrollRow, PayrollSummary, Period

logger = logging.getLogger(__name__)


def _zeroed_row(employee: User, team: str, error: str) -> PayrollRow:
    profile = employee.profile
    return PayrollRow(
        employee_id=employee.employee_id,
        name=profile.full_name,
        department=profile.department,
        designation=profile.designation,
        team=team,
        profile_picture_url=profile.profile_picture_url,
        gross_salary=0.0,
        working_days=0.0,
        earned_salary=0.0,
        deductions=0.0,
        net_salary=0.0,
        error=error,
    )


def compute_payroll_report(
    employees: Sequence[User],
    month: int,
    year: int,
    attendance_by_employee: Mapping[str, Sequence[AttendanceRecord]],
    leaves_by_employee: Mapping[str, Sequence[LeaveRequest]],
    *,
    team_names: Optional[Mapping[str, str]] = None,
    calculator: Optional[PayrollCalculator] = None,
) -> PayrollReport:
    """Payroll for every employee of a period.

    Maps are keyed by the user's store id. A row that fails is zeroed with an
    ``error`` message and does not abort the batch.
    """
    period = Period(month=month, year=year)
    calculator = calculator or StandardPayrollCalculator()
    team_names = team_names or {}

    rows: list[PayrollRow] = []
    for employee in employees:
        team = team_names.get(employee.team_id or "", UNASSIGNED_TEAM)
        try:
            slip = calculator.salary_slip(
                employee,
                period,
                attendance_by_employee.get(employee.id, ()),
                leaves_by_employee.get(employee.id, ()),
                team_name=team,
            )
        except (DomainError, ValueError, TypeError) as e:
            logger.warning("Payroll row for %s zeroed: %s", employee.employee_id, e)
            rows.append(_zeroed_row(employee, team, str(e)))
            continue

        rows.append(
            PayrollRow(
                employee_id=employee.employee_id,
                name=employee.profile.full_name,
                department=employee.profile.department,
                designation=employee.profile.designation,
                team=team,
                profile_picture_url=employee.profile.profile_picture_url,
                gross_salary=slip.salary.gross_salary,
                working_days=slip.working_days,
                earned_salary=slip.earned_salary,
                deductions=slip.deductions,
                net_salary=slip.net_earned,
            )
        )

    summary = PayrollSummary(
        total_employees=len(rows),
        total_gross=sum(r.gross_salary for r in rows),
        total_earned=sum(r.earned_salary for r in rows),
        total_deductions=sum(r.deductions for r in rows),
        total_net=sum(r.net_salary for r in rows),
    )
    return PayrollReport(period=period, summary=summary, rows=rows)
