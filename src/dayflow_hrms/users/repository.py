from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewUser, Profile, SalaryStructure, User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, new_user: NewUser) -> str:
        raise NotImplementedError

    def get_by_verification_token(self, token: str) -> Optional[User]:
        raise NotImplementedError

    def mark_email_verified(self, user_id: str) -> bool:
        """Set the verified flag and drop the pending token."""

        raise NotImplementedError

    def get_by_verification_token(self, token: str) -> Optional[User]:
        raise NotImplementedError

    def mark_email_verified(self, user_id: str) -> bool:
        """Set the verified flag and drop the pending token."""

        raise NotImplementedError

    def update_profile(self, user_id: str, profile: Profile) -> bool:
        raise NotImplementedError

    def update_salary_structure(self, user_id: str, salary: SalaryStructure) -> bool:
        raise NotImplementedError

    def set_team(self, user_id: str, team_id: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        raise NotImplementedError

    def list_users(
        self,
        *,
        role: Optional[Role] = None,
        department: Optional[str] = None,
        company_id: Optional[str] = None,
    ) -> Sequence[User]:
        """Users sorted by department then full name."""

        raise NotImplementedError

    def count(self, *, role: Optional[Role] = None, company_id: Optional[str] = None) -> int:
        raise NotImplementedError
