from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..users.model import EmployeeRef


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (employee, date).

    ``date`` is the YYYY-MM-DD key; ``total_hours`` stays 0 until checkout.
    """

    id: str
    employee_id: str
    date: str
    status: AttendanceStatus
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_hours: float = 0.0
    employee: Optional[EmployeeRef] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "employee_id": self.employee.to_dict() if self.employee else self.employee_id,
            "date": self.date,
            "status": self.status.value,
            "check_in": self.check_in.isoformat() if self.check_in else None,
            "check_out": self.check_out.isoformat() if self.check_out else None,
            "total_hours": self.total_hours,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


def worked_hours(check_in: datetime, check_out: datetime) -> float:
    """Hours between check-in and check-out, rounded to 2 decimals."""
    return round((check_out - check_in).total_seconds() / 3600, 2)
