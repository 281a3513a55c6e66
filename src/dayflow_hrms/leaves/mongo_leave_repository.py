from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mongo_base import LEAVES, employee_lookup, id_str, optional_date, store_errors, to_datetime, to_object_id
from ..users.mongo_user_repository import employee_ref_from_doc
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository


def leave_from_doc(doc: dict) -> LeaveRequest:
    return LeaveRequest(
        id=str(doc["_id"]),
        employee_id=id_str(doc.get("employee_id")) or "",
        leave_type=LeaveType(doc["leave_type"]),
        start_date=optional_date(doc["start_date"]),
        end_date=optional_date(doc["end_date"]),
        reason=doc.get("reason") or "",
        status=RequestStatus(doc.get("status") or RequestStatus.PENDING.value),
        attachment_url=doc.get("attachment_url"),
        admin_remarks=doc.get("admin_remarks"),
        employee=employee_ref_from_doc(doc.get("employee")),
        created_at=doc.get("createdAt"),
    )


class MongoLeaveRepository(LeaveRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.database()[LEAVES]

    def create_leave(self, new_leave: NewLeaveRequest) -> str:
        now = now_local()
        doc = {
            "employee_id": to_object_id(new_leave.employee_id),
            "leave_type": new_leave.leave_type.value,
            "start_date": to_datetime(new_leave.start_date),
            "end_date": to_datetime(new_leave.end_date),
            "reason": new_leave.reason,
            "attachment_url": new_leave.attachment_url,
            "status": RequestStatus.PENDING.value,
            "createdAt": now,
            "updatedAt": now,
        }
        with store_errors("creating leave request"):
            return str(self._col.insert_one(doc).inserted_id)

    def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        oid = to_object_id(leave_id)
        if oid is None:
            return None
        with store_errors("loading leave request"):
            doc = self._col.find_one({"_id": oid})
        return leave_from_doc(doc) if doc else None

    def list_leaves(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        overlapping: Optional[tuple[date, date]] = None,
        with_employee: bool = False,
    ) -> Sequence[LeaveRequest]:
        match: dict[str, Any] = {}
        if employee_id:
            match["employee_id"] = to_object_id(employee_id)
        if status is not None:
            match["status"] = status.value
        if overlapping is not None:
            start, end = overlapping
            match["start_date"] = {"$lte": to_datetime(end)}
            match["end_date"] = {"$gte": to_datetime(start)}

        pipeline: list[dict] = [{"$match": match}, {"$sort": {"createdAt": -1}}]
        if with_employee:
            pipeline.extend(employee_lookup())
        with store_errors("listing leave requests"):
            docs = list(self._col.aggregate(pipeline))
        return [leave_from_doc(d) for d in docs]

    def decide(
        self,
        *,
        leave_id: str,
        status: RequestStatus,
        admin_remarks: Optional[str] = None,
    ) -> bool:
        changes: dict[str, Any] = {"status": status.value, "updatedAt": now_local()}
        if admin_remarks:
            changes["admin_remarks"] = admin_remarks
        with store_errors("deciding leave request"):
            result = self._col.update_one(
                {"_id": to_object_id(leave_id), "status": RequestStatus.PENDING.value},
                {"$set": changes},
            )
        return result.modified_count > 0
