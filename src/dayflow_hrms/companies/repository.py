from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Company, NewCompany


class CompanyRepository(Protocol):
    def get_by_id(self, company_id: str) -> Optional[Company]:
        raise NotImplementedError

    def get_by_name(self, company_name: str) -> Optional[Company]:
        raise NotImplementedError

    def get_by_code(self, company_code: str) -> Optional[Company]:
        raise NotImplementedError

    def get_oldest(self) -> Optional[Company]:
        """First company ever created; the default tenant."""

        raise NotImplementedError

    def code_exists(self, company_code: str) -> bool:
        raise NotImplementedError

    def create_company(self, new_company: NewCompany) -> str:
        raise NotImplementedError

    def set_created_by(self, company_id: str, user_id: str) -> bool:
        raise NotImplementedError

    def list_active(self) -> Sequence[Company]:
        """Active companies sorted by name."""

        raise NotImplementedError
