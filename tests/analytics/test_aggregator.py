from datetime import date, datetime

from conftest import make_user
from dayflow_hrms.analytics.aggregator import (
    attendance_rate,
    compute_attendance_trends,
    compute_daily_status,
    compute_dashboard_snapshot,
    compute_employee_stats,
    is_active,
)
from dayflow_hrms.attendance.model import AttendanceRecord
from dayflow_hrms.core.enums import AttendanceStatus, LeaveType, RequestStatus
from dayflow_hrms.leaves.model import LeaveRequest

TODAY = date(2024, 4, 5)


def _att(uid, day, status=AttendanceStatus.PRESENT, **kw):
    return AttendanceRecord(id=f"{uid}-{day}", employee_id=uid, date=day, status=status, **kw)


def _leave(uid, start, end, status=RequestStatus.APPROVED, leave_type=LeaveType.PAID):
    return LeaveRequest(
        id=f"{uid}-{start}", employee_id=uid, leave_type=leave_type,
        start_date=start, end_date=end, reason="r", status=status,
    )


def test_attendance_rate_rounds_to_one_decimal():
    assert attendance_rate(40, 10, 5) == 80.0
    assert attendance_rate(1, 3, 1) == 33.3


def test_attendance_rate_is_zero_without_expected_days():
    assert attendance_rate(5, 0, 10) == 0.0
    assert attendance_rate(5, 10, 0) == 0.0


def test_dashboard_monthly_rate_counts_present_up_to_today():
    employees = [make_user(f"u{i}") for i in range(10)]
    month = [_att(f"u{i}", f"2024-04-0{d}") for i in range(8) for d in range(1, 6)]
    month.append(_att("u9", "2024-04-20"))

    stats = compute_dashboard_snapshot(TODAY, employees, [], month, [])

    assert stats.monthly.actual_attendance == 40
    assert stats.monthly.expected_attendance == 50
    assert stats.monthly.attendance_rate == 80.0
    assert stats.monthly.total_days == 30


def test_dashboard_today_and_leave_counts():
    employees = [make_user("u1", department="Ops"), make_user("u2", department="Ops"), make_user("u3")]
    today = [
        _att("u1", "2024-04-05"),
        _att("u2", "2024-04-05", AttendanceStatus.HALF_DAY),
        _att("u3", "2024-04-04"),
    ]
    leaves = [
        _leave("u1", TODAY, TODAY, RequestStatus.PENDING),
        _leave("u2", TODAY, TODAY, RequestStatus.REJECTED, LeaveType.SICK),
    ]

    out = compute_dashboard_snapshot(TODAY, employees, today, today, leaves).to_dict()

    assert out["todayAttendance"]["present"] == 1
    assert out["todayAttendance"]["halfDay"] == 1
    assert out["todayAttendance"]["total"] == 2
    assert out["leaves"] == {"pending": 1, "approved": 0, "rejected": 1, "total": 2}
    assert out["departmentStats"][0] == {"_id": "Ops", "count": 2}
    assert {"_id": "Sick", "count": 1} in out["leaveTypeStats"]


def test_active_employee_depends_on_joining_date():
    assert is_active(make_user("u1"), TODAY)
    assert is_active(make_user("u1", date_of_joining=date(2024, 4, 5)), TODAY)
    assert not is_active(make_user("u1", date_of_joining=date(2024, 5, 1)), TODAY)


def test_daily_status_attendance_wins_over_leave():
    employees = [make_user("u1"), make_user("u2"), make_user("u3"), make_user("u4")]
    attendance = [_att("u1", "2024-04-05", check_in=datetime(2024, 4, 5, 9, 0))]
    leaves = [
        _leave("u1", date(2024, 4, 4), date(2024, 4, 6)),
        _leave("u2", date(2024, 4, 5), date(2024, 4, 5)),
        _leave("u3", date(2024, 4, 5), date(2024, 4, 8), RequestStatus.PENDING),
    ]

    report = compute_daily_status(TODAY, employees, attendance, leaves)
    status = {row.employee_id: row.daily_status for row in report.employees}

    assert status == {"U1": "Present", "U2": "Approved", "U3": "Pending", "U4": "Absent"}
    assert report.summary.present == 1
    assert report.summary.absent == 1
    assert report.summary.on_leave == 2
    assert report.summary.checked_in == 1
    assert report.summary.checked_out == 0
    assert report.to_dict()["date"] == "2024-04-05"


def test_trends_window_and_ordering():
    records = [
        _att("u1", "2024-04-05"),
        _att("u2", "2024-04-05"),
        _att("u1", "2024-04-01", AttendanceStatus.ABSENT),
        _att("u1", "2024-02-01"),
    ]

    trends = compute_attendance_trends(records, window_days=30, today=TODAY)

    assert trends == [
        {"date": "2024-04-01", "status": "Absent", "count": 1},
        {"date": "2024-04-05", "status": "Present", "count": 2},
    ]


def test_employee_stats_counts_per_employee():
    employees = [make_user("u1"), make_user("u2")]
    attendance = [_att("u1", "2024-04-01"), _att("u1", "2024-04-02"), _att("u2", "2024-04-01", AttendanceStatus.ABSENT)]
    leaves = [
        _leave("u1", TODAY, TODAY),
        _leave("u2", TODAY, TODAY, RequestStatus.PENDING),
    ]

    stats = {s.id: s for s in compute_employee_stats(employees, attendance, leaves)}

    assert stats["u1"].attendance_count == 2
    assert stats["u1"].leave_count == 1
    assert stats["u2"].attendance_count == 0
    assert stats["u2"].to_dict()["pendingLeaves"] == 1
