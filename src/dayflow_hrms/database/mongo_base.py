from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Optional

from bson import ObjectId
from pymongo.errors import ConnectionFailure, DuplicateKeyError, ExecutionTimeout, PyMongoError

from ..common.datetime_utils import to_date
from ..core.exceptions import StoreUnavailableError

USERS = "users"
COMPANIES = "companies"
TEAMS = "teams"
ATTENDANCE = "attendances"
LEAVES = "leaverequests"


@contextmanager
def store_errors(action: str):
    """Translate driver failures into StoreUnavailableError."""
    try:
        yield
    except DuplicateKeyError:
        # Unique-index violations are business errors, left to the caller.
        raise
    except (ConnectionFailure, ExecutionTimeout) as e:
        raise StoreUnavailableError(f"Record store unavailable while {action}") from e
    except PyMongoError as e:
        raise StoreUnavailableError(f"Record store error while {action}: {e}") from e


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if value and ObjectId.is_valid(str(value)):
        return ObjectId(str(value))
    return None


def id_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        return id_str(value.get("_id"))
    return str(value)


def to_datetime(value: Optional[date]) -> Optional[datetime]:
    """BSON has no date-only type; dates are stored as midnight datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def optional_date(value: Any) -> Optional[date]:
    return to_date(value) if value else None


def employee_lookup(local_field: str = "employee_id", as_field: str = "employee") -> list[dict]:
    """Aggregation stages inlining a small projection of the referenced user."""
    return [
        {"$lookup": {"from": USERS, "localField": local_field, "foreignField": "_id", "as": "_ref"}},
        {
            "$set": {
                as_field: {
                    "$let": {
                        "vars": {"e": {"$arrayElemAt": ["$_ref", 0]}},
                        "in": {
                            "_id": "$$e._id",
                            "employee_id": "$$e.employee_id",
                            "full_name": "$$e.profile.full_name",
                            "department": "$$e.profile.department",
                            "email": "$$e.email",
                        },
                    }
                }
            }
        },
        {"$unset": "_ref"},
    ]
