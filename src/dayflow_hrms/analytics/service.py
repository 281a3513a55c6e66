from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import date_key, month_bounds, now_local, parse_iso_date
from ..core.constants import DEFAULT_TREND_DAYS, MAX_TREND_DAYS
from ..core.enums import AttendanceStatus, MANAGER_ROLES, RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..leaves.repository import LeaveRepository
from ..users.repository import UserRepository
from .aggregator import (
    compute_attendance_trends,
    compute_daily_status,
    compute_dashboard_snapshot,
    compute_employee_stats,
)
from .model import DailyReport, DashboardStats, EmployeeStats

RECENT_ACTIVITY_LIMIT = 5


def _require_manager(role: Role) -> None:
    if role not in MANAGER_ROLES:
        raise AuthorizationError("Not authorized as Admin or HR")


class AnalyticsService:
    """Loads records from the store and hands them to the aggregator."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
    ):
        self._users = users
        self._attendance = attendance
        self._leaves = leaves

    def dashboard(self, *, current_role: Role, today: Optional[date] = None) -> DashboardStats:
        _require_manager(current_role)
        today = today or now_local().date()
        first, last = month_bounds(today.year, today.month)

        employees = self._users.list_users(role=Role.EMPLOYEE)
        today_key = date_key(today)
        attendance_today = self._attendance.list_records(date_from=today_key, date_to=today_key)
        attendance_month = self._attendance.list_records(date_from=date_key(first), date_to=date_key(last))
        leaves = self._leaves.list_leaves()

        recent_leaves = self._leaves.list_leaves(with_employee=True)[:RECENT_ACTIVITY_LIMIT]
        recent_attendance = self._attendance.list_recent(RECENT_ACTIVITY_LIMIT)

        return compute_dashboard_snapshot(
            today,
            employees,
            attendance_today,
            attendance_month,
            leaves,
            recent_leaves=recent_leaves,
            recent_attendance=recent_attendance,
        )

    def employee_stats(self, *, current_role: Role) -> list[EmployeeStats]:
        _require_manager(current_role)
        return compute_employee_stats(
            self._users.list_users(role=Role.EMPLOYEE),
            self._attendance.list_records(status=AttendanceStatus.PRESENT),
            self._leaves.list_leaves(),
        )

    def attendance_trends(self, *, current_role: Role, days=None, today: Optional[date] = None) -> list[dict]:
        _require_manager(current_role)
        try:
            window = int(days) if days else DEFAULT_TREND_DAYS
        except (TypeError, ValueError):
            window = DEFAULT_TREND_DAYS
        if window <= 0:
            window = DEFAULT_TREND_DAYS
        if window > MAX_TREND_DAYS:
            raise ValidationError(f"days must be at most {MAX_TREND_DAYS}")

        today = today or now_local().date()
        since = date_key(today - timedelta(days=window))
        records = self._attendance.list_records(date_from=since)
        return compute_attendance_trends(records, window_days=window, today=today)

    def daily_data(self, *, current_role: Role, target_date: Optional[str] = None) -> DailyReport:
        _require_manager(current_role)
        if target_date:
            try:
                day = parse_iso_date(target_date)
            except ValueError:
                raise ValidationError("date must be YYYY-MM-DD")
        else:
            day = now_local().date()

        key = date_key(day)
        return compute_daily_status(
            day,
            self._users.list_users(role=Role.EMPLOYEE),
            self._attendance.list_records(date_from=key, date_to=key),
            self._leaves.list_leaves(overlapping=(day, day)),
        )

    def workforce_stats(self, *, current_role: Role, today: Optional[date] = None) -> dict:
        """Headcounts by role, today's presence, pending leaves, recent joinings."""
        _require_manager(current_role)
        today = today or now_local().date()
        key = date_key(today)

        employees = self._users.list_users(role=Role.EMPLOYEE)
        todays = self._attendance.list_records(date_from=key, date_to=key)
        since = today - timedelta(days=DEFAULT_TREND_DAYS)
        dashboard = compute_dashboard_snapshot(today, employees, todays, (), ())

        return {
            "totalEmployees": len(employees),
            "totalAdmins": self._users.count(role=Role.ADMIN),
            "totalHR": self._users.count(role=Role.HR_OFFICER),
            "todayAttendance": dashboard.today.present,
            "todayAbsent": dashboard.today.absent,
            "pendingLeaves": len(self._leaves.list_leaves(status=RequestStatus.PENDING)),
            "recentJoinings": sum(
                1 for e in employees if e.profile.date_of_joining and e.profile.date_of_joining >= since
            ),
            "departmentStats": [{"_id": k, "count": n} for k, n in dashboard.department_stats],
        }
