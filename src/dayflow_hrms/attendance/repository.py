from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: str, date_key: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: str,
        date_key: str,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> str:
        """Raise ValidationError when a record already exists for the date."""

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: str, check_out: datetime, total_hours: float) -> bool:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        with_employee: bool = False,
    ) -> Sequence[AttendanceRecord]:
        """Records filtered by inclusive date-key range, newest date first."""

        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        """Most recently created records with employee projection."""

        raise NotImplementedError
