from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest, NewLeaveRequest


class LeaveRepository(Protocol):
    def create_leave(self, new_leave: NewLeaveRequest) -> str:
        raise NotImplementedError

    def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        overlapping: Optional[tuple[date, date]] = None,
        with_employee: bool = False,
    ) -> Sequence[LeaveRequest]:
        """Leaves filtered by owner/status/date overlap, newest first.

        ``overlapping`` keeps leaves whose [start, end] intersects the
        inclusive range.
        """

        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: str,
        status: RequestStatus,
        admin_remarks: Optional[str] = None,
    ) -> bool:
        """Move a Pending leave to a final status; False if it was not Pending."""

        raise NotImplementedError
