from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Optional

from ..core.enums import Gender, MaritalStatus, Role

EARNING_FIELDS = ("basic", "hra", "conveyance", "medical", "special_allowance")
DEDUCTION_FIELDS = ("pf", "professional_tax", "tds")
SALARY_COMPONENT_FIELDS = EARNING_FIELDS + DEDUCTION_FIELDS
DERIVED_SALARY_FIELDS = ("gross_salary", "net_salary")


@dataclass(frozen=True)
class SalaryStructure:
    """Monthly salary components.

    Gross and net are derived from the components on every access, so a stored
    structure can never carry stale totals.
    """

    basic: float = 0.0
    hra: float = 0.0
    conveyance: float = 0.0
    medical: float = 0.0
    special_allowance: float = 0.0
    pf: float = 0.0
    professional_tax: float = 0.0
    tds: float = 0.0

    @property
    def gross_salary(self) -> float:
        return self.basic + self.hra + self.conveyance + self.medical + self.special_allowance

    @property
    def total_deductions(self) -> float:
        return self.pf + self.professional_tax + self.tds

    @property
    def net_salary(self) -> float:
        return self.gross_salary - self.total_deductions

    @classmethod
    def from_mapping(cls, data: Optional[dict]) -> "SalaryStructure":
        data = data or {}
        return cls(**{name: float(data.get(name) or 0) for name in SALARY_COMPONENT_FIELDS})

    def to_dict(self) -> dict:
        out = {name: getattr(self, name) for name in SALARY_COMPONENT_FIELDS}
        out["gross_salary"] = self.gross_salary
        out["net_salary"] = self.net_salary
        return out


@dataclass(frozen=True)
class Profile:
    full_name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    marital_status: Optional[MaritalStatus] = None
    job_title: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    date_of_joining: Optional[date] = None
    profile_picture_url: Optional[str] = None
    bank_account_number: Optional[str] = None
    pan_number: Optional[str] = None
    aadhar_number: Optional[str] = None


PROFILE_FIELDS = tuple(f.name for f in fields(Profile))


@dataclass(frozen=True)
class User:
    """Domain entity: an account (Admin, HR Officer or Employee).

    Note: plain data object, no store access.
    """

    id: str
    employee_id: str
    email: str
    password_hash: str
    role: Role
    profile: Profile
    salary_structure: Optional[SalaryStructure] = None
    team_id: Optional[str] = None
    company_id: Optional[str] = None
    email_verified: bool = False
    email_verification_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return self.profile.full_name

    @property
    def department(self) -> Optional[str]:
        return self.profile.department


@dataclass(frozen=True)
class NewUser:
    employee_id: str
    email: str
    password_hash: str
    role: Role
    profile: Profile
    salary_structure: SalaryStructure = field(default_factory=SalaryStructure)
    team_id: Optional[str] = None
    company_id: Optional[str] = None
    email_verified: bool = False
    email_verification_token: Optional[str] = None


@dataclass(frozen=True)
class EmployeeRef:
    """Read-only projection of a user inlined into attendance/leave views."""

    id: str
    employee_id: Optional[str] = None
    full_name: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "employee_id": self.employee_id,
            "full_name": self.full_name,
            "department": self.department,
            "email": self.email,
        }
