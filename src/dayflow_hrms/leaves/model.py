from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveType, RequestStatus
from ..users.model import EmployeeRef


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave request.

    Created Pending; decided once (Approved or Rejected) by Admin/HR.
    """

    id: str
    employee_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    attachment_url: Optional[str] = None
    admin_remarks: Optional[str] = None
    employee: Optional[EmployeeRef] = None
    created_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "employee_id": self.employee.to_dict() if self.employee else self.employee_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "reason": self.reason,
            "attachment_url": self.attachment_url,
            "status": self.status.value,
            "admin_remarks": self.admin_remarks,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewLeaveRequest:
    employee_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    attachment_url: Optional[str] = None
