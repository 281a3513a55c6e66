from datetime import datetime

import pytest

from conftest import make_user
from dayflow_hrms.attendance.model import AttendanceRecord, worked_hours
from dayflow_hrms.attendance.service import AttendanceService
from dayflow_hrms.core.enums import AttendanceStatus, Role
from dayflow_hrms.core.exceptions import NotFoundError, ValidationError
from dayflow_hrms.sync.model import MirrorCollection

MORNING = datetime(2024, 4, 5, 9, 0)
EVENING = datetime(2024, 4, 5, 17, 30)


@pytest.fixture
def service(users_repo, attendance_repo, mirror):
    users_repo.add(make_user("u1", employee_id="EMP0001"))
    users_repo.add(make_user("u2", employee_id="EMP0002"))
    return AttendanceService(attendance_repo, users_repo, mirror=mirror)


def test_check_in_creates_present_record(service, mirror):
    record = service.check_in("u1", now=MORNING)

    assert record.date == "2024-04-05"
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in == MORNING
    assert mirror.calls == [MirrorCollection.ATTENDANCE]


def test_second_check_in_same_day_is_rejected(service):
    service.check_in("u1", now=MORNING)

    with pytest.raises(ValidationError):
        service.check_in("u1", now=EVENING)


def test_check_out_records_hours_once(service):
    service.check_in("u1", now=MORNING)

    record = service.check_out("u1", now=EVENING)

    assert record.total_hours == 8.5
    with pytest.raises(ValidationError):
        service.check_out("u1", now=EVENING)


def test_check_out_without_check_in_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.check_out("u1", now=EVENING)


def test_worked_hours_rounds_to_two_decimals():
    assert worked_hours(datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 9, 20)) == 0.33


def test_employee_history_is_limited_to_own_records(service, attendance_repo):
    attendance_repo.add(AttendanceRecord(id="a", employee_id="u1", date="2024-04-01", status=AttendanceStatus.PRESENT))
    attendance_repo.add(AttendanceRecord(id="b", employee_id="u2", date="2024-04-01", status=AttendanceStatus.PRESENT))

    rows = service.history(current_role=Role.EMPLOYEE, current_user_id="u1", employee_code="EMP0002")

    assert [r.id for r in rows] == ["a"]


def test_manager_history_filters(service, attendance_repo):
    for rid, uid, day in [("a", "u1", "2024-03-31"), ("b", "u1", "2024-04-02"), ("c", "u2", "2024-04-03")]:
        attendance_repo.add(AttendanceRecord(id=rid, employee_id=uid, date=day, status=AttendanceStatus.PRESENT))

    by_month = service.history(current_role=Role.ADMIN, current_user_id="a1", month="2024-04")
    by_code = service.history(current_role=Role.ADMIN, current_user_id="a1", employee_code="EMP0001")
    by_day = service.history(current_role=Role.HR_OFFICER, current_user_id="h1", day="2024-04-03")
    unknown = service.history(current_role=Role.ADMIN, current_user_id="a1", employee_code="EMP9999")

    assert [r.id for r in by_month] == ["c", "b"]
    assert [r.id for r in by_code] == ["b", "a"]
    assert [r.id for r in by_day] == ["c"]
    assert by_day[0].employee.employee_id == "EMP0002"
    assert unknown == []


def test_bad_date_filter_is_rejected(service):
    with pytest.raises(ValidationError):
        service.history(current_role=Role.ADMIN, current_user_id="a1", month="April")
