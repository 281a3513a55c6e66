from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..attendance.model import AttendanceRecord
from ..leaves.model import LeaveRequest


def _buckets(pairs: list[tuple[Any, int]]) -> list[dict]:
    return [{"_id": key, "count": count} for key, count in pairs]


@dataclass(frozen=True)
class TodayAttendance:
    present: int = 0
    absent: int = 0
    on_leave: int = 0
    half_day: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.on_leave + self.half_day


@dataclass(frozen=True)
class MonthlyStats:
    attendance_rate: float
    total_days: int
    days_passed: int
    actual_attendance: int
    expected_attendance: int


@dataclass(frozen=True)
class LeaveCounts:
    pending: int = 0
    approved: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.rejected


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    active_employees: int
    today: TodayAttendance
    monthly: MonthlyStats
    month_status_breakdown: list[tuple[str, int]]
    leaves: LeaveCounts
    department_stats: list[tuple[Optional[str], int]]
    gender_stats: list[tuple[Optional[str], int]]
    leave_type_stats: list[tuple[str, int]]
    recent_leaves: list[LeaveRequest] = field(default_factory=list)
    recent_attendance: list[AttendanceRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "employees": {"total": self.total_employees, "active": self.active_employees},
            "todayAttendance": {
                "present": self.today.present,
                "absent": self.today.absent,
                "onLeave": self.today.on_leave,
                "halfDay": self.today.half_day,
                "total": self.today.total,
            },
            "monthlyStats": {
                "attendanceRate": self.monthly.attendance_rate,
                "totalDays": self.monthly.total_days,
                "daysPassed": self.monthly.days_passed,
                "actualAttendance": self.monthly.actual_attendance,
                "expectedAttendance": self.monthly.expected_attendance,
            },
            "monthlyAttendance": _buckets(self.month_status_breakdown),
            "leaves": {
                "pending": self.leaves.pending,
                "approved": self.leaves.approved,
                "rejected": self.leaves.rejected,
                "total": self.leaves.total,
            },
            "departmentStats": _buckets(self.department_stats),
            "genderStats": _buckets(self.gender_stats),
            "leaveTypeStats": _buckets(self.leave_type_stats),
            "recentActivities": {
                "leaves": [lv.to_dict() for lv in self.recent_leaves],
                "attendance": [a.to_dict() for a in self.recent_attendance],
            },
        }


@dataclass(frozen=True)
class DailyEmployeeStatus:
    employee_id: str
    employee_name: str
    email: str
    department: str
    attendance: Optional[AttendanceRecord]
    leave: Optional[LeaveRequest]
    daily_status: str

    def to_dict(self) -> dict:
        a = self.attendance
        lv = self.leave
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "email": self.email,
            "department": self.department,
            "attendance": {
                "status": a.status.value,
                "check_in": a.check_in.isoformat() if a.check_in else None,
                "check_out": a.check_out.isoformat() if a.check_out else None,
                "total_hours": a.total_hours,
            }
            if a
            else None,
            "leave": {
                "leave_type": lv.leave_type.value,
                "status": lv.status.value,
                "start_date": lv.start_date.isoformat(),
                "end_date": lv.end_date.isoformat(),
                "reason": lv.reason,
            }
            if lv
            else None,
            "daily_status": self.daily_status,
        }


@dataclass(frozen=True)
class DailySummary:
    total_employees: int = 0
    present: int = 0
    absent: int = 0
    on_leave: int = 0
    half_day: int = 0
    checked_in: int = 0
    checked_out: int = 0

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "present": self.present,
            "absent": self.absent,
            "on_leave": self.on_leave,
            "half_day": self.half_day,
            "checked_in": self.checked_in,
            "checked_out": self.checked_out,
        }


@dataclass(frozen=True)
class DailyReport:
    date: str
    summary: DailySummary
    employees: list[DailyEmployeeStatus] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "summary": self.summary.to_dict(),
            "employees": [e.to_dict() for e in self.employees],
        }


@dataclass(frozen=True)
class EmployeeStats:
    id: str
    employee_id: str
    email: str
    full_name: str
    department: Optional[str]
    attendance_count: int
    leave_count: int
    pending_leaves: int

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "employee_id": self.employee_id,
            "email": self.email,
            "profile": {"full_name": self.full_name, "department": self.department},
            "attendanceCount": self.attendance_count,
            "leaveCount": self.leave_count,
            "pendingLeaves": self.pending_leaves,
        }
