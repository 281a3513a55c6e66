"""Read-only projection of store documents into plain JSON-ready dicts."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable

from bson import ObjectId

from .model import MirrorCollection

# Never exported to a mirror file.
SECRET_FIELDS = frozenset({"password", "email_verification_token", "__v"})


def to_plain(value: Any) -> Any:
    """ObjectIds become strings and datetimes ISO-8601, recursively."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items() if k not in SECRET_FIELDS}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def _employee_fields(doc: dict) -> dict:
    """Replace the joined employee with its id plus a display block."""
    out = dict(doc)
    employee = out.pop("employee", None) or {}
    out["employee_id"] = employee.get("_id") or doc.get("employee_id")
    out["employee"] = {
        "employee_id": employee.get("employee_id"),
        "full_name": employee.get("full_name"),
    }
    return out


def project_user(doc: dict) -> dict:
    out = to_plain(doc)
    out["team"] = out.get("team") or None
    out["company"] = out.get("company") or None
    return out


def project_attendance(doc: dict) -> dict:
    return to_plain(_employee_fields(doc))


def project_leave(doc: dict) -> dict:
    return to_plain(_employee_fields(doc))


PROJECTIONS: dict[MirrorCollection, Callable[[dict], dict]] = {
    MirrorCollection.USERS: project_user,
    MirrorCollection.ATTENDANCE: project_attendance,
    MirrorCollection.LEAVES: project_leave,
}


def project(name: MirrorCollection, docs) -> list[dict]:
    fn = PROJECTIONS[name]
    return [fn(d) for d in docs]
