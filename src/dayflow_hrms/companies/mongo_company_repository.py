from __future__ import annotations

from typing import Optional, Sequence

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mongo_base import COMPANIES, id_str, store_errors, to_object_id
from .model import Company, NewCompany
from .repository import CompanyRepository


def company_from_doc(doc: dict) -> Company:
    return Company(
        id=str(doc["_id"]),
        company_name=doc["company_name"],
        company_code=doc.get("company_code") or "",
        description=doc.get("description"),
        address=doc.get("address"),
        phone=doc.get("phone"),
        email=doc.get("email"),
        website=doc.get("website"),
        logo_url=doc.get("logo_url"),
        is_active=bool(doc.get("is_active", True)),
        created_by=id_str(doc.get("created_by")),
        created_at=doc.get("createdAt"),
    )


class MongoCompanyRepository(CompanyRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.database()[COMPANIES]

    def get_by_id(self, company_id: str) -> Optional[Company]:
        oid = to_object_id(company_id)
        if oid is None:
            return None
        with store_errors("loading company"):
            doc = self._col.find_one({"_id": oid})
        return company_from_doc(doc) if doc else None

    def get_by_name(self, company_name: str) -> Optional[Company]:
        with store_errors("loading company by name"):
            doc = self._col.find_one({"company_name": company_name})
        return company_from_doc(doc) if doc else None

    def get_by_code(self, company_code: str) -> Optional[Company]:
        with store_errors("loading company by code"):
            doc = self._col.find_one({"company_code": company_code})
        return company_from_doc(doc) if doc else None

    def get_oldest(self) -> Optional[Company]:
        with store_errors("loading default company"):
            doc = self._col.find_one({}, sort=[("createdAt", ASCENDING)])
        return company_from_doc(doc) if doc else None

    def code_exists(self, company_code: str) -> bool:
        with store_errors("checking company code"):
            return self._col.count_documents({"company_code": company_code}, limit=1) > 0

    def create_company(self, new_company: NewCompany) -> str:
        now = now_local()
        doc = {
            "company_name": new_company.company_name,
            "company_code": new_company.company_code,
            "description": new_company.description,
            "address": new_company.address,
            "phone": new_company.phone,
            "email": new_company.email,
            "website": new_company.website,
            "is_active": True,
            "created_by": to_object_id(new_company.created_by),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            with store_errors("creating company"):
                result = self._col.insert_one(doc)
        except DuplicateKeyError:
            raise ValidationError("Company name or code already exists")
        return str(result.inserted_id)

    def set_created_by(self, company_id: str, user_id: str) -> bool:
        with store_errors("updating company"):
            result = self._col.update_one(
                {"_id": to_object_id(company_id)},
                {"$set": {"created_by": to_object_id(user_id), "updatedAt": now_local()}},
            )
        return result.matched_count > 0

    def list_active(self) -> Sequence[Company]:
        with store_errors("listing companies"):
            docs = list(self._col.find({"is_active": True}).sort("company_name", ASCENDING))
        return [company_from_doc(d) for d in docs]
