from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from ...attendance.model import AttendanceRecord
from ...leaves.model import LeaveRequest
from ...users.model import User
from ..model import AttendanceSummary, Period, SalarySlip


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def attendance_summary(
        self,
        period: Period,
        attendance: Iterable[AttendanceRecord],
        approved_leaves: Iterable[LeaveRequest],
    ) -> AttendanceSummary:
        raise NotImplementedError

    @abstractmethod
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
        raise NotImplementedError
