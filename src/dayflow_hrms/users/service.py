from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local, to_date
from ..common.validators import require_email, require_non_empty, require_strong_password
from ..companies.repository import CompanyRepository
from ..companies.service import CompanyService
from ..core.constants import (
    EMPLOYEE_ID_PREFIX,
    GENERATED_PASSWORD_LENGTH,
    PASSWORD_SPECIAL_CHARS,
    VERIFICATION_TOKEN_BYTES,
)
from ..core.enums import Gender, MANAGER_ROLES, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..sync.model import MirrorCollection, MirrorTrigger, NullMirror
from ..teams.service import TeamService
from .model import NewUser, Profile, User
from .repository import UserRepository
from .updates import ProfileUpdate, SalaryStructureUpdate

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "Dayflow Inc."


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """Random password that always satisfies the password policy."""
    rng = secrets.SystemRandom()
    chars = [
        rng.choice(string.ascii_uppercase),
        rng.choice(string.ascii_lowercase),
        rng.choice(string.digits),
        rng.choice(PASSWORD_SPECIAL_CHARS),
    ]
    pool = string.ascii_letters + string.digits + PASSWORD_SPECIAL_CHARS
    chars += [rng.choice(pool) for _ in range(length - len(chars))]
    rng.shuffle(chars)
    return "".join(chars)


def generate_verification_token() -> str:
    return secrets.token_hex(VERIFICATION_TOKEN_BYTES)


def next_employee_id(users: UserRepository, company_id: Optional[str]) -> str:
    """EMP0001-style id, sequential per company; skips ids already taken."""
    n = users.count(role=Role.EMPLOYEE, company_id=company_id) + 1
    while True:
        candidate = f"{EMPLOYEE_ID_PREFIX}{n:04d}"
        if not users.get_by_employee_id(candidate):
            return candidate
        n += 1


def _parse_gender(value) -> Optional[Gender]:
    if not value:
        return None
    try:
        return Gender(value)
    except ValueError:
        raise ValidationError(f"Invalid value for gender: {value!r}")


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    employee_id: str
    full_name: str
    email: str
    role: Role
    company_id: Optional[str]
    profile_picture_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.id,
            employee_id=user.employee_id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            company_id=user.company_id,
            profile_picture_url=user.profile.profile_picture_url,
        )

    def to_dict(self) -> dict:
        return {
            "_id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "employee_id": self.employee_id,
            "role": self.role.value,
            "company": self.company_id,
            "profile_picture": self.profile_picture_url,
        }


class AuthService:
    """Use case: login and self-registration."""

    def __init__(
        self,
        users: UserRepository,
        companies: CompanyRepository,
        company_service: CompanyService,
        *,
        mirror: Optional[MirrorTrigger] = None,
    ):
        self._users = users
        self._companies = companies
        self._company_service = company_service
        self._mirror = mirror or NullMirror()

    def authenticate(
        self,
        *,
        password: str,
        email: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> SessionUser:
        if employee_id:
            user = self._users.get_by_employee_id(employee_id.strip())
        elif email:
            user = self._users.get_by_email(email.strip().lower())
        else:
            raise ValidationError("Please provide either email or employee ID")

        if not user or not user.password_hash:
            raise AuthenticationError("Invalid credentials")
        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Unknown hash method, e.g. a placeholder value.
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser.from_user(user)

    def _resolve_company(self, *, company_code: Optional[str]) -> str:
        if company_code:
            company = self._companies.get_by_code(company_code.strip().upper())
            if not company:
                raise ValidationError("Invalid company code")
            return company.id

        company = self._companies.get_oldest()
        if not company:
            company = self._company_service.create_company(
                company_name=DEFAULT_COMPANY_NAME,
                description="Default Organization",
            )
        return company.id

    def register(
        self,
        *,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        gender: Optional[str] = None,
        employee_id: Optional[str] = None,
        company_name: Optional[str] = None,
        company_code: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> SessionUser:
        """Self-registration.

        Supplying ``company_name`` founds a new company and makes the
        registrant its Admin. Otherwise the user joins the company named by
        ``company_code`` (or the default one) as an Employee; the very first
        account in an empty store is always an Admin.
        """
        email = require_email(email)
        require_strong_password(password)
        employee_id = (employee_id or "").strip() or None

        if self._users.get_by_email(email) or (employee_id and self._users.get_by_employee_id(employee_id)):
            raise ValidationError("User with this email or employee ID already exists")

        founding = bool(company_name and company_name.strip())
        if founding:
            company = self._company_service.create_company(company_name=company_name, email=email)
            company_id = company.id
        else:
            company_id = self._resolve_company(company_code=company_code)

        role = Role.ADMIN if founding or self._users.count() == 0 else Role.EMPLOYEE
        full_name = f"{first_name or ''} {last_name or ''}".strip() or email.split("@")[0]

        user_id = self._users.create_user(
            NewUser(
                employee_id=employee_id or next_employee_id(self._users, company_id),
                email=email,
                password_hash=generate_password_hash(password),
                role=role,
                profile=Profile(
                    full_name=full_name,
                    first_name=first_name or None,
                    last_name=last_name or None,
                    gender=_parse_gender(gender),
                    profile_picture_url=profile_picture or None,
                ),
                company_id=company_id,
                email_verification_token=generate_verification_token(),
            )
        )
        if founding:
            self._companies.set_created_by(company_id, user_id)

        self._mirror.sync_collection(MirrorCollection.USERS)
        logger.info("Registered %s as %s", email, role.value)
        return SessionUser.from_user(self._users.get_by_id(user_id))

    def verify_email(self, token: str) -> None:
        """Consume a registration token. A used or unknown token is rejected."""
        token = (token or "").strip()
        user = self._users.get_by_verification_token(token) if token else None
        if not user:
            raise ValidationError("Invalid verification token")
        self._users.mark_email_verified(user.id)
        self._mirror.sync_collection(MirrorCollection.USERS)
        logger.info("Email verified for %s", user.email)


@dataclass(frozen=True)
class CreatedEmployee:
    user: User
    # Generated password, shown once; None when the caller chose one.
    password: Optional[str]

    def to_dict(self) -> dict:
        u = self.user
        return {
            "employee": {
                "_id": u.id,
                "employee_id": u.employee_id,
                "email": u.email,
                "full_name": u.full_name,
                "department": u.department,
                "designation": u.profile.designation,
            },
            "credentials": {
                "employee_id": u.employee_id,
                "email": u.email,
                "password": self.password if self.password else "As set during creation",
                "message": "Save these credentials. Password will not be shown again."
                if self.password
                else "Employee created with custom password.",
            },
        }


def user_view(user: User) -> dict:
    """Public representation of a user; never includes the password hash."""
    p = user.profile
    profile = {
        "full_name": p.full_name,
        "first_name": p.first_name,
        "last_name": p.last_name,
        "phone": p.phone,
        "address": p.address,
        "date_of_birth": p.date_of_birth.isoformat() if p.date_of_birth else None,
        "gender": p.gender.value if p.gender else None,
        "marital_status": p.marital_status.value if p.marital_status else None,
        "job_title": p.job_title,
        "designation": p.designation,
        "department": p.department,
        "date_of_joining": p.date_of_joining.isoformat() if p.date_of_joining else None,
        "profile_picture_url": p.profile_picture_url,
        "bank_account_number": p.bank_account_number,
        "pan_number": p.pan_number,
        "aadhar_number": p.aadhar_number,
    }
    return {
        "_id": user.id,
        "employee_id": user.employee_id,
        "email": user.email,
        "role": user.role.value,
        "team": user.team_id,
        "company": user.company_id,
        "email_verified": user.email_verified,
        "profile": profile,
        "salary_structure": user.salary_structure.to_dict() if user.salary_structure else None,
    }


class EmployeeService:
    """Use case: manage employees and profiles (Admin/HR and self-service)."""

    def __init__(
        self,
        users: UserRepository,
        teams: TeamService,
        *,
        mirror: Optional[MirrorTrigger] = None,
    ):
        self._users = users
        self._teams = teams
        self._mirror = mirror or NullMirror()

    def _require(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_employee(
        self,
        *,
        current_role: Role,
        current_company_id: Optional[str],
        first_name: str,
        last_name: str,
        email: str,
        department: str,
        designation: str,
        role: str = Role.EMPLOYEE.value,
        phone: Optional[str] = None,
        date_of_joining=None,
        gender: Optional[str] = None,
        salary_structure: Optional[Mapping[str, Any]] = None,
        team: Optional[str] = None,
        password: Optional[str] = None,
    ) -> CreatedEmployee:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized as Admin or HR")
        try:
            new_role = Role(role or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Role must be Employee or HR Officer")
        if new_role == Role.ADMIN:
            raise ValidationError("Role must be Employee or HR Officer")
        if new_role == Role.HR_OFFICER and current_role != Role.ADMIN:
            raise AuthorizationError("Only Admin can create HR Officer profiles")

        first_name = require_non_empty(first_name, "first_name")
        last_name = require_non_empty(last_name, "last_name")
        email = require_email(email)
        department = require_non_empty(department, "department")
        designation = require_non_empty(designation, "designation")

        if new_role == Role.EMPLOYEE and not team:
            raise ValidationError("Team assignment is required for employees")
        if team:
            self._teams.require_assignable(team)

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        generated = None
        if password:
            require_strong_password(password)
        else:
            password = generated = generate_password()

        salary = SalaryStructureUpdate.from_payload(salary_structure or {}).apply(None)
        try:
            joined = to_date(date_of_joining) if date_of_joining else now_local().date()
        except ValueError:
            raise ValidationError("date_of_joining must be a YYYY-MM-DD date")

        user_id = self._users.create_user(
            NewUser(
                employee_id=next_employee_id(self._users, current_company_id),
                email=email,
                password_hash=generate_password_hash(password),
                role=new_role,
                email_verified=True,
                team_id=team or None,
                company_id=current_company_id,
                profile=Profile(
                    full_name=f"{first_name} {last_name}",
                    first_name=first_name,
                    last_name=last_name,
                    phone=phone or None,
                    department=department,
                    designation=designation,
                    job_title=designation,
                    date_of_joining=joined,
                    gender=_parse_gender(gender),
                ),
                salary_structure=salary,
            )
        )
        if team and new_role == Role.EMPLOYEE:
            self._teams.add_member(team_id=team, user_id=user_id)

        self._mirror.sync_collection(MirrorCollection.USERS)
        user = self._require(user_id)
        logger.info("Created %s %s", new_role.value, user.employee_id)
        return CreatedEmployee(user=user, password=generated)

    def list_employees(self):
        return self._users.list_users(role=Role.EMPLOYEE)

    def list_users(self, *, current_role: Role):
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized as Admin or HR")
        return self._users.list_users()

    def get_user(self, *, current_role: Role, user_id: str) -> User:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized as Admin or HR")
        return self._require(user_id)

    def get_profile(self, user_id: str) -> User:
        return self._require(user_id)

    def update_own_profile(self, *, user_id: str, payload: Mapping[str, Any]) -> User:
        """Self-service edit. Employees may only touch phone, address and picture.

        Admin/HR send profile fields under ``profile``; a top-level
        ``profile_picture_url`` is accepted from everyone.
        """
        user = self._require(user_id)
        payload = dict(payload or {})
        if user.role in MANAGER_ROLES:
            changes = dict(payload.pop("profile", None) or {})
            if "profile_picture_url" in payload:
                changes["profile_picture_url"] = payload.pop("profile_picture_url")
        else:
            changes = payload

        update = ProfileUpdate.for_role(user.role, changes)
        if not update.is_empty:
            self._users.update_profile(user.id, update.apply(user.profile))
            self._mirror.sync_collection(MirrorCollection.USERS)
        return self._require(user_id)

    def update_user(
        self,
        *,
        current_role: Role,
        user_id: str,
        profile: Optional[Mapping[str, Any]] = None,
        salary_structure: Optional[Mapping[str, Any]] = None,
    ) -> User:
        """Admin/HR edit of any profile field and of the salary structure."""
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized as Admin or HR")
        user = self._require(user_id)

        profile_update = ProfileUpdate.for_role(current_role, profile or {})
        salary_update = SalaryStructureUpdate.from_payload(salary_structure or {}) if salary_structure else None

        if not profile_update.is_empty:
            self._users.update_profile(user.id, profile_update.apply(user.profile))
        if salary_update is not None:
            self._users.update_salary_structure(user.id, salary_update.apply(user.salary_structure))
        if not profile_update.is_empty or salary_update is not None:
            self._mirror.sync_collection(MirrorCollection.USERS)
        return self._require(user_id)

    def delete_user(self, *, current_role: Role, current_user_id: str, user_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only Admin can delete users")
        if user_id == current_user_id:
            raise ValidationError("You cannot delete your own account")
        self._require(user_id)
        if not self._users.delete_by_id(user_id):
            raise ValidationError("Deleting user failed")
        self._mirror.sync_collection(MirrorCollection.USERS)
