"""Pure dashboard, daily-status and trend computations over loaded records.

Nothing here touches the store; the analytics service loads the inputs.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import date_key, days_in_month
from ..core.constants import DEFAULT_TREND_DAYS
from ..core.enums import AttendanceStatus, RequestStatus
from ..leaves.model import LeaveRequest
from ..users.model import User
from .model import (
    DailyEmployeeStatus,
    DailyReport,
    DailySummary,
    DashboardStats,
    EmployeeStats,
    LeaveCounts,
    MonthlyStats,
    TodayAttendance,
)

ABSENT = AttendanceStatus.ABSENT.value


def is_active(employee: User, today: date) -> bool:
    joined = employee.profile.date_of_joining
    return joined is None or joined <= today


def attendance_rate(actual: int, total_employees: int, days_passed: int) -> float:
    expected = total_employees * days_passed
    if expected <= 0:
        return 0.0
    return round(actual / expected * 100, 1)


def compute_dashboard_snapshot(
    today: date,
    employees: Sequence[User],
    attendance_today: Iterable[AttendanceRecord],
    attendance_month: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRequest],
    *,
    recent_leaves: Sequence[LeaveRequest] = (),
    recent_attendance: Sequence[AttendanceRecord] = (),
) -> DashboardStats:
    today_key = date_key(today)
    today_counts = Counter(r.status for r in attendance_today if r.date == today_key)

    month_records = list(attendance_month)
    month_breakdown = Counter(r.status.value for r in month_records)
    actual = sum(
        1 for r in month_records if r.status == AttendanceStatus.PRESENT and r.date <= today_key
    )
    total_employees = len(employees)

    leaves = list(leaves)
    leave_status = Counter(lv.status for lv in leaves)

    department = Counter(e.profile.department for e in employees)
    gender = Counter(e.profile.gender.value if e.profile.gender else None for e in employees)
    leave_types = Counter(lv.leave_type.value for lv in leaves)

    return DashboardStats(
        total_employees=total_employees,
        active_employees=sum(1 for e in employees if is_active(e, today)),
        today=TodayAttendance(
            present=today_counts[AttendanceStatus.PRESENT],
            absent=today_counts[AttendanceStatus.ABSENT],
            on_leave=today_counts[AttendanceStatus.LEAVE],
            half_day=today_counts[AttendanceStatus.HALF_DAY],
        ),
        monthly=MonthlyStats(
            attendance_rate=attendance_rate(actual, total_employees, today.day),
            total_days=days_in_month(today.year, today.month),
            days_passed=today.day,
            actual_attendance=actual,
            expected_attendance=total_employees * today.day,
        ),
        month_status_breakdown=list(month_breakdown.items()),
        leaves=LeaveCounts(
            pending=leave_status[RequestStatus.PENDING],
            approved=leave_status[RequestStatus.APPROVED],
            rejected=leave_status[RequestStatus.REJECTED],
        ),
        department_stats=department.most_common(),
        gender_stats=list(gender.items()),
        leave_type_stats=list(leave_types.items()),
        recent_leaves=list(recent_leaves),
        recent_attendance=list(recent_attendance),
    )


def compute_daily_status(
    target_date: date,
    employees: Sequence[User],
    attendance: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRequest],
) -> DailyReport:
    """Per-employee status for one day.

    Attendance wins over a covering leave; with neither the employee is
    Absent. Only Approved covering leaves count as on leave in the summary.
    """
    key = date_key(target_date)
    attendance_by_user: dict[str, AttendanceRecord] = {}
    for record in attendance:
        if record.date == key:
            attendance_by_user.setdefault(record.employee_id, record)

    leave_by_user: dict[str, LeaveRequest] = {}
    for leave in leaves:
        if leave.covers(target_date):
            leave_by_user.setdefault(leave.employee_id, leave)

    rows: list[DailyEmployeeStatus] = []
    for emp in employees:
        record = attendance_by_user.get(emp.id)
        leave = leave_by_user.get(emp.id)
        if record:
            status = record.status.value
        elif leave:
            status = leave.status.value
        else:
            status = ABSENT
        rows.append(
            DailyEmployeeStatus(
                employee_id=emp.employee_id,
                employee_name=emp.profile.full_name or "N/A",
                email=emp.email,
                department=emp.profile.department or "N/A",
                attendance=record,
                leave=leave,
                daily_status=status,
            )
        )

    summary = DailySummary(
        total_employees=len(rows),
        present=sum(1 for r in rows if r.daily_status == AttendanceStatus.PRESENT.value),
        absent=sum(1 for r in rows if r.daily_status == ABSENT),
        on_leave=sum(1 for r in rows if r.leave and r.leave.status == RequestStatus.APPROVED),
        half_day=sum(1 for r in rows if r.daily_status == AttendanceStatus.HALF_DAY.value),
        checked_in=sum(1 for r in rows if r.attendance and r.attendance.check_in),
        checked_out=sum(1 for r in rows if r.attendance and r.attendance.check_out),
    )
    return DailyReport(date=key, summary=summary, employees=rows)


def compute_attendance_trends(
    records: Iterable[AttendanceRecord],
    window_days: int = DEFAULT_TREND_DAYS,
    today: Optional[date] = None,
) -> list[dict]:
    """(date, status) counts for the last ``window_days`` days, oldest first."""
    today = today or date.today()
    since = date_key(today - timedelta(days=window_days))
    counts = Counter((r.date, r.status.value) for r in records if r.date >= since)
    return [
        {"date": d, "status": s, "count": n}
        for (d, s), n in sorted(counts.items())
    ]


def compute_employee_stats(
    employees: Sequence[User],
    attendance: Iterable[AttendanceRecord],
    leaves: Iterable[LeaveRequest],
) -> list[EmployeeStats]:
    present = Counter(r.employee_id for r in attendance if r.status == AttendanceStatus.PRESENT)
    approved: Counter = Counter()
    pending: Counter = Counter()
    for leave in leaves:
        if leave.status == RequestStatus.APPROVED:
            approved[leave.employee_id] += 1
        elif leave.status == RequestStatus.PENDING:
            pending[leave.employee_id] += 1

    return [
        EmployeeStats(
            id=emp.id,
            employee_id=emp.employee_id,
            email=emp.email,
            full_name=emp.full_name,
            department=emp.department,
            attendance_count=present[emp.id],
            leave_count=approved[emp.id],
            pending_leaves=pending[emp.id],
        )
        for emp in employees
    ]
