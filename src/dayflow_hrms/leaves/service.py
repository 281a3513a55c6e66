from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.enums import LeaveType, MANAGER_ROLES, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..sync.model import MirrorCollection, MirrorTrigger, NullMirror
from ..users.repository import UserRepository
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository


def _parse_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or "")[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        users: UserRepository,
        *,
        mirror: Optional[MirrorTrigger] = None,
    ):
        self._leaves = leaves
        self._users = users
        self._mirror = mirror or NullMirror()

    def create_leave(
        self,
        *,
        user_id: str,
        leave_type: str,
        start_date,
        end_date,
        reason: str,
        attachment_url: Optional[str] = None,
    ) -> LeaveRequest:
        try:
            kind = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Leave type must be Paid, Sick or Unpaid")

        start = _parse_date(start_date, "start_date")
        end = _parse_date(end_date, "end_date")
        if end < start:
            raise ValidationError("End date must be on or after start date")

        reason = require_non_empty(reason, "Reason")
        leave_id = self._leaves.create_leave(
            NewLeaveRequest(
                employee_id=user_id,
                leave_type=kind,
                start_date=start,
                end_date=end,
                reason=reason,
                attachment_url=attachment_url or None,
            )
        )
        self._mirror.sync_collection(MirrorCollection.LEAVES)
        return self._leaves.get_by_id(leave_id)

    def my_leaves(self, *, user_id: str):
        return self._leaves.list_leaves(employee_id=user_id)

    def list_leaves(
        self,
        *,
        current_role: Role,
        status: Optional[str] = None,
        employee_code: Optional[str] = None,
        employee_ref: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ):
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized")

        status_filter = None
        if status:
            try:
                status_filter = RequestStatus(status)
            except ValueError:
                raise ValidationError("Invalid status filter")

        employee_id = None
        if employee_code:
            user = self._users.get_by_employee_id(employee_code)
            employee_id = user.id if user else None
        elif employee_ref:
            user = self._users.get_by_id(employee_ref)
            employee_id = user.id if user else None
        if (employee_code or employee_ref) and not employee_id:
            return []

        overlapping = None
        if start_date and end_date:
            overlapping = (_parse_date(start_date, "startDate"), _parse_date(end_date, "endDate"))

        return self._leaves.list_leaves(
            employee_id=employee_id,
            status=status_filter,
            overlapping=overlapping,
            with_employee=True,
        )

    def decide_leave(
        self,
        *,
        current_role: Role,
        leave_id: str,
        status: str,
        admin_remarks: Optional[str] = None,
    ) -> LeaveRequest:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized")
        if status not in (RequestStatus.APPROVED.value, RequestStatus.REJECTED.value):
            raise ValidationError("Status must be Approved or Rejected")

        leave = self._leaves.get_by_id(leave_id)
        if not leave:
            raise NotFoundError("Leave request not found")
        if leave.status != RequestStatus.PENDING:
            raise ValidationError("Leave request has already been decided")

        ok = self._leaves.decide(
            leave_id=leave_id,
            status=RequestStatus(status),
            admin_remarks=(admin_remarks or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Leave request has already been decided")

        self._mirror.sync_collection(MirrorCollection.LEAVES)
        return self._leaves.get_by_id(leave_id)
