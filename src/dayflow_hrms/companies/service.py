from __future__ import annotations

import re
from typing import Callable, Optional

from ..common.validators import require_non_empty
from ..core.constants import COMPANY_CODE_BASE_LENGTH, COMPANY_CODE_MAX_LENGTH
from ..core.exceptions import ValidationError
from .model import Company, NewCompany
from .repository import CompanyRepository


def generate_company_code(company_name: str, exists: Callable[[str], bool]) -> str:
    """Derive a unique short code from a company name.

    Upper-cased alphanumerics, first 6 characters; on collision a counter is
    appended (1, 2, ...) and the result truncated to 10 characters.
    """
    base = re.sub(r"[^A-Z0-9]", "", company_name.upper())[:COMPANY_CODE_BASE_LENGTH]
    if not base:
        raise ValidationError("Company name must contain letters or digits")

    code = base
    counter = 1
    while exists(code):
        code = f"{base}{counter}"[:COMPANY_CODE_MAX_LENGTH]
        counter += 1
    return code


class CompanyService:
    def __init__(self, companies: CompanyRepository):
        self._companies = companies

    def create_company(
        self,
        *,
        company_name: str,
        created_by: Optional[str] = None,
        description: Optional[str] = None,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        website: Optional[str] = None,
    ) -> Company:
        name = require_non_empty(company_name, "Company name")
        if self._companies.get_by_name(name):
            raise ValidationError("Company already exists")

        code = generate_company_code(name, self._companies.code_exists)
        company_id = self._companies.create_company(
            NewCompany(
                company_name=name,
                company_code=code,
                description=description,
                address=address,
                phone=phone,
                email=email,
                website=website,
                created_by=created_by,
            )
        )
        company = self._companies.get_by_id(company_id)
        if not company:
            raise ValidationError("Creating company failed")
        return company

    def list_companies(self):
        return self._companies.list_active()
