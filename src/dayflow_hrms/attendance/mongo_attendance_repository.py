from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mongo_base import ATTENDANCE, employee_lookup, id_str, store_errors, to_object_id
from ..users.mongo_user_repository import employee_ref_from_doc
from .model import AttendanceRecord
from .repository import AttendanceRepository


def attendance_from_doc(doc: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(doc["_id"]),
        employee_id=id_str(doc.get("employee_id")) or "",
        date=doc["date"],
        status=AttendanceStatus(doc.get("status") or AttendanceStatus.ABSENT.value),
        check_in=doc.get("check_in"),
        check_out=doc.get("check_out"),
        total_hours=float(doc.get("total_hours") or 0),
        employee=employee_ref_from_doc(doc.get("employee")),
        created_at=doc.get("createdAt"),
    )


class MongoAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.database()[ATTENDANCE]

    def get_for_employee_and_date(self, employee_id: str, date_key: str) -> Optional[AttendanceRecord]:
        with store_errors("loading attendance"):
            doc = self._col.find_one({"employee_id": to_object_id(employee_id), "date": date_key})
        return attendance_from_doc(doc) if doc else None

    def create_checkin(
        self,
        *,
        employee_id: str,
        date_key: str,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> str:
        now = now_local()
        doc = {
            "employee_id": to_object_id(employee_id),
            "date": date_key,
            "check_in": check_in,
            "check_out": None,
            "status": status.value,
            "total_hours": 0,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            with store_errors("creating attendance"):
                return str(self._col.insert_one(doc).inserted_id)
        except DuplicateKeyError:
            raise ValidationError("Already checked in today")

    def update_checkout(self, *, attendance_id: str, check_out: datetime, total_hours: float) -> bool:
        with store_errors("updating attendance"):
            result = self._col.update_one(
                {"_id": to_object_id(attendance_id)},
                {"$set": {"check_out": check_out, "total_hours": total_hours, "updatedAt": now_local()}},
            )
        return result.matched_count > 0

    def list_records(
        self,
        *,
        employee_id: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        with_employee: bool = False,
    ) -> Sequence[AttendanceRecord]:
        match: dict[str, Any] = {}
        if employee_id:
            match["employee_id"] = to_object_id(employee_id)
        date_range: dict[str, str] = {}
        if date_from:
            date_range["$gte"] = date_from
        if date_to:
            date_range["$lte"] = date_to
        if date_range:
            match["date"] = date_range
        if status is not None:
            match["status"] = status.value

        pipeline: list[dict] = [{"$match": match}, {"$sort": {"date": -1, "createdAt": -1}}]
        if with_employee:
            pipeline.extend(employee_lookup())
        with store_errors("listing attendance"):
            docs = list(self._col.aggregate(pipeline))
        return [attendance_from_doc(d) for d in docs]

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        pipeline = [{"$sort": {"createdAt": DESCENDING}}, {"$limit": int(limit)}, *employee_lookup()]
        with store_errors("listing recent attendance"):
            docs = list(self._col.aggregate(pipeline))
        return [attendance_from_doc(d) for d in docs]
