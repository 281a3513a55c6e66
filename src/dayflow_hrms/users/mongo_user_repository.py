from __future__ import annotations

from typing import Any, Optional, Sequence

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_local
from ..core.enums import Gender, MaritalStatus, Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mongo_base import USERS, id_str, optional_date, store_errors, to_datetime, to_object_id
from .model import PROFILE_FIELDS, EmployeeRef, NewUser, Profile, SalaryStructure, User
from .repository import UserRepository


def profile_to_doc(profile: Profile) -> dict:
    doc: dict[str, Any] = {}
    for name in PROFILE_FIELDS:
        value = getattr(profile, name)
        if name in ("date_of_birth", "date_of_joining"):
            value = to_datetime(value)
        elif isinstance(value, (Gender, MaritalStatus)):
            value = value.value
        doc[name] = value
    return doc


def profile_from_doc(doc: Optional[dict]) -> Profile:
    doc = doc or {}
    return Profile(
        full_name=doc.get("full_name") or "",
        first_name=doc.get("first_name"),
        last_name=doc.get("last_name"),
        phone=doc.get("phone"),
        address=doc.get("address"),
        date_of_birth=optional_date(doc.get("date_of_birth")),
        gender=Gender(doc["gender"]) if doc.get("gender") else None,
        marital_status=MaritalStatus(doc["marital_status"]) if doc.get("marital_status") else None,
        job_title=doc.get("job_title"),
        designation=doc.get("designation"),
        department=doc.get("department"),
        date_of_joining=optional_date(doc.get("date_of_joining")),
        profile_picture_url=doc.get("profile_picture_url"),
        bank_account_number=doc.get("bank_account_number"),
        pan_number=doc.get("pan_number"),
        aadhar_number=doc.get("aadhar_number"),
    )


def user_from_doc(doc: dict) -> User:
    salary = doc.get("salary_structure")
    return User(
        id=str(doc["_id"]),
        employee_id=doc.get("employee_id") or "",
        email=doc.get("email") or "",
        password_hash=doc.get("password") or "",
        role=Role(doc.get("role") or Role.EMPLOYEE.value),
        profile=profile_from_doc(doc.get("profile")),
        salary_structure=SalaryStructure.from_mapping(salary) if salary is not None else None,
        team_id=id_str(doc.get("team")),
        company_id=id_str(doc.get("company")),
        email_verified=bool(doc.get("email_verified", False)),
        email_verification_token=doc.get("email_verification_token"),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def employee_ref_from_doc(doc: Optional[dict]) -> Optional[EmployeeRef]:
    """Build a ref from the projection inlined by ``employee_lookup``."""
    if not doc or not doc.get("_id"):
        return None
    return EmployeeRef(
        id=str(doc["_id"]),
        employee_id=doc.get("employee_id"),
        full_name=doc.get("full_name"),
        department=doc.get("department"),
        email=doc.get("email"),
    )


class MongoUserRepository(UserRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.database()[USERS]

    def _find_one(self, query: dict, action: str) -> Optional[User]:
        with store_errors(action):
            doc = self._col.find_one(query)
        return user_from_doc(doc) if doc else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self._find_one({"_id": oid}, "loading user")

    def get_by_email(self, email: str) -> Optional[User]:
        return self._find_one({"email": (email or "").strip().lower()}, "loading user by email")

    def get_by_employee_id(self, employee_id: str) -> Optional[User]:
        return self._find_one({"employee_id": employee_id}, "loading user by employee id")

    def create_user(self, new_user: NewUser) -> str:
        now = now_local()
        doc = {
            "employee_id": new_user.employee_id,
            "email": new_user.email,
            "password": new_user.password_hash,
            "role": new_user.role.value,
            "company": to_object_id(new_user.company_id),
            "email_verified": bool(new_user.email_verified),
            "email_verification_token": new_user.email_verification_token,
            "profile": profile_to_doc(new_user.profile),
            "salary_structure": new_user.salary_structure.to_dict(),
            "team": to_object_id(new_user.team_id),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            with store_errors("creating user"):
                result = self._col.insert_one(doc)
        except DuplicateKeyError:
            raise ValidationError("User with this email or employee ID already exists")
        return str(result.inserted_id)

    def get_by_verification_token(self, token: str) -> Optional[User]:
        return self._find_one({"email_verification_token": token}, "loading user by verification token")

    def mark_email_verified(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        with store_errors("verifying email"):
            result = self._col.update_one(
                {"_id": oid},
                {
                    "$set": {"email_verified": True, "updatedAt": now_local()},
                    "$unset": {"email_verification_token": ""},
                },
            )
        return result.matched_count > 0

    def _update(self, user_id: str, changes: dict, action: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        changes = dict(changes, updatedAt=now_local())
        with store_errors(action):
            result = self._col.update_one({"_id": oid}, {"$set": changes})
        return result.matched_count > 0

    def update_profile(self, user_id: str, profile: Profile) -> bool:
        return self._update(user_id, {"profile": profile_to_doc(profile)}, "updating profile")

    def update_salary_structure(self, user_id: str, salary: SalaryStructure) -> bool:
        return self._update(user_id, {"salary_structure": salary.to_dict()}, "updating salary structure")

    def set_team(self, user_id: str, team_id: Optional[str]) -> bool:
        return self._update(user_id, {"team": to_object_id(team_id)}, "assigning team")

    def delete_by_id(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        with store_errors("deleting user"):
            return self._col.delete_one({"_id": oid}).deleted_count > 0

    @staticmethod
    def _filter(role: Optional[Role], department: Optional[str], company_id: Optional[str]) -> dict:
        query: dict[str, Any] = {}
        if role is not None:
            query["role"] = role.value
        if department:
            query["profile.department"] = department
        if company_id:
            query["company"] = to_object_id(company_id)
        return query

    def list_users(
        self,
        *,
        role: Optional[Role] = None,
        department: Optional[str] = None,
        company_id: Optional[str] = None,
    ) -> Sequence[User]:
        query = self._filter(role, department, company_id)
        with store_errors("listing users"):
            docs = list(
                self._col.find(query).sort([("profile.department", ASCENDING), ("profile.full_name", ASCENDING)])
            )
        return [user_from_doc(d) for d in docs]

    def count(self, *, role: Optional[Role] = None, company_id: Optional[str] = None) -> int:
        with store_errors("counting users"):
            return int(self._col.count_documents(self._filter(role, None, company_id)))
