from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from .base import PayrollCalculator
from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import inclusive_overlap_days, now_local, parse_iso_date
from ...core.constants import UNASSIGNED_TEAM
from ...core.enums import AttendanceStatus, PAID_LEAVE_TYPES, RequestStatus
from ...core.exceptions import ValidationError
from ...leaves.model import LeaveRequest
from ...users.model import User
from ..model import AttendanceSummary, Period, SalarySlip, SlipEmployee


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross / days-in-month x (present + half/2 + paid leave).

    Deductions are flat per month and are not pro-rated by attendance.
    """

    def paid_leave_days(self, period: Period, approved_leaves: Iterable[LeaveRequest]) -> int:
        total = 0
        for leave in approved_leaves:
            if leave.status != RequestStatus.APPROVED or leave.leave_type not in PAID_LEAVE_TYPES:
                continue
            total += inclusive_overlap_days(leave.start_date, leave.end_date, period.start, period.end)
        return total

    def attendance_summary(
        self,
        period: Period,
        attendance: Iterable[AttendanceRecord],
        approved_leaves: Iterable[LeaveRequest],
    ) -> AttendanceSummary:
        counts = {AttendanceStatus.PRESENT: 0, AttendanceStatus.HALF_DAY: 0, AttendanceStatus.ABSENT: 0}
        for record in attendance:
            try:
                day = parse_iso_date(record.date)
            except ValueError:
                continue
            if not period.contains(day):
                continue
            if record.status in counts:
                counts[record.status] += 1

        return AttendanceSummary(
            total_days=period.total_days,
            present_days=counts[AttendanceStatus.PRESENT],
            half_days=counts[AttendanceStatus.HALF_DAY],
            absent_days=counts[AttendanceStatus.ABSENT],
            leave_days=self.paid_leave_days(period, approved_leaves),
        )

    def salary_slip(
        self,
        employee: User,
        period: Period,
        attendance: Iterable[AttendanceRecord],
        approved_leaves: Iterable[LeaveRequest],
        *,
        team_name: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> SalarySlip:
        salary = employee.salary_structure
        if salary is None:
            raise ValidationError(f"Salary structure not configured for {employee.employee_id}")

        summary = self.attendance_summary(period, attendance, approved_leaves)
        per_day = salary.gross_salary / summary.total_days
        earned = per_day * summary.working_days
        deductions = salary.total_deductions

        profile = employee.profile
        return SalarySlip(
            employee=SlipEmployee(
                employee_id=employee.employee_id,
                name=profile.full_name,
                department=profile.department,
                designation=profile.designation,
                team=team_name or UNASSIGNED_TEAM,
                date_of_joining=profile.date_of_joining,
            ),
            period=period,
            attendance=summary,
            salary=salary,
            per_day_salary=per_day,
            earned_salary=earned,
            deductions=deductions,
            net_earned=earned - deductions,
            generated_at=generated_at or now_local(),
        )


def compute_salary_slip(
    employee: User,
    month: int,
    year: int,
    attendance_records: Iterable[AttendanceRecord],
    approved_leaves: Iterable[LeaveRequest],
    *,
    team_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> SalarySlip:
    return StandardPayrollCalculator().salary_slip(
        employee,
        Period(month=month, year=year),
        attendance_records,
        approved_leaves,
        team_name=team_name,
        generated_at=generated_at,
    )
