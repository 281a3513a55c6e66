from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import date_key, month_bounds, now_local, parse_iso_date
from ..core.enums import AttendanceStatus, MANAGER_ROLES, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..sync.model import MirrorCollection, MirrorTrigger, NullMirror
from ..users.repository import UserRepository
from .model import AttendanceRecord, worked_hours
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        mirror: Optional[MirrorTrigger] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._mirror = mirror or NullMirror()

    def check_in(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = date_key(now.date())

        existing = self._attendance.get_for_employee_and_date(user_id, today)
        if existing:
            raise ValidationError("Already checked in today")

        self._attendance.create_checkin(
            employee_id=user_id,
            date_key=today,
            check_in=now,
            status=AttendanceStatus.PRESENT,
        )
        self._mirror.sync_collection(MirrorCollection.ATTENDANCE)
        return self._attendance.get_for_employee_and_date(user_id, today)

    def check_out(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = date_key(now.date())

        record = self._attendance.get_for_employee_and_date(user_id, today)
        if not record:
            raise NotFoundError("No check-in record found for today")
        if record.check_out is not None:
            raise ValidationError("Already checked out today")
        if record.check_in is None:
            raise ValidationError("Attendance record has no check-in time")

        hours = worked_hours(record.check_in, now)
        if not self._attendance.update_checkout(attendance_id=record.id, check_out=now, total_hours=hours):
            raise ValidationError("Check-out failed")

        self._mirror.sync_collection(MirrorCollection.ATTENDANCE)
        logger.info("Employee %s checked out after %.2f hours", user_id, hours)
        return self._attendance.get_for_employee_and_date(user_id, today)

    def get_today_record(self, user_id: str, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        now = now or now_local()
        return self._attendance.get_for_employee_and_date(user_id, date_key(now.date()))

    def _resolve_employee(self, *, employee_code: Optional[str], employee_ref: Optional[str]) -> Optional[str]:
        if employee_code:
            user = self._users.get_by_employee_id(employee_code)
            return user.id if user else None
        if employee_ref:
            user = self._users.get_by_id(employee_ref)
            return user.id if user else None
        return None

    def history(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        employee_code: Optional[str] = None,
        employee_ref: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        day: Optional[str] = None,
        month: Optional[str] = None,
    ):
        """Attendance history: everyone for Admin/HR, own records otherwise.

        Date filters, in order of precedence: start/end range, single day,
        month (``YYYY-MM``).
        """
        is_manager = current_role in MANAGER_ROLES
        if is_manager:
            employee_id = self._resolve_employee(employee_code=employee_code, employee_ref=employee_ref)
            if (employee_code or employee_ref) and not employee_id:
                return []
        else:
            employee_id = current_user_id

        date_from = date_to = None
        try:
            if start_date and end_date:
                date_from = date_key(parse_iso_date(start_date))
                date_to = date_key(parse_iso_date(end_date))
            elif day:
                date_from = date_to = date_key(parse_iso_date(day))
            elif month:
                year_s, month_s = month.split("-", 1)
                first, last = month_bounds(int(year_s), int(month_s))
                date_from, date_to = date_key(first), date_key(last)
        except ValueError:
            raise ValidationError("Invalid date filter")

        return self._attendance.list_records(
            employee_id=employee_id,
            date_from=date_from,
            date_to=date_to,
            with_employee=is_manager,
        )
