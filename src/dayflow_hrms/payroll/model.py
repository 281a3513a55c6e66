from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import days_in_month, month_bounds, month_name
from ..common.validators import require_month, require_year
from ..users.model import SalaryStructure


@dataclass(frozen=True)
class Period:
    """A (month, year) pair scoping payroll and attendance queries."""

    month: int
    year: int

    def __post_init__(self):
        require_month(self.month)
        require_year(self.year)

    @property
    def total_days(self) -> int:
        return days_in_month(self.year, self.month)

    @property
    def start(self) -> date:
        return month_bounds(self.year, self.month)[0]

    @property
    def end(self) -> date:
        return month_bounds(self.year, self.month)[1]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        return {"month": self.month, "year": self.year, "monthName": month_name(self.month)}


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    present_days: int
    half_days: int
    absent_days: int
    leave_days: int

    @property
    def working_days(self) -> float:
        return self.present_days + 0.5 * self.half_days + self.leave_days

    def to_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "working_days": round(self.working_days, 1),
            "absent_days": self.absent_days,
            "present_days": self.present_days,
            "half_days": self.half_days,
            "leave_days": self.leave_days,
        }


@dataclass(frozen=True)
class SlipEmployee:
    employee_id: str
    name: str
    department: Optional[str]
    designation: Optional[str]
    team: str
    date_of_joining: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "department": self.department,
            "designation": self.designation,
            "team": self.team,
            "date_of_joining": self.date_of_joining.isoformat() if self.date_of_joining else None,
        }


@dataclass(frozen=True)
class SalarySlip:
    employee: SlipEmployee
    period: Period
    attendance: AttendanceSummary
    salary: SalaryStructure
    per_day_salary: float
    earned_salary: float
    deductions: float
    net_earned: float
    generated_at: datetime

    @property
    def working_days(self) -> float:
        return round(self.attendance.working_days, 1)

    def to_dict(self) -> dict:
        s = self.salary
        return {
            "employee": self.employee.to_dict(),
            "period": self.period.to_dict(),
            "attendance": self.attendance.to_dict(),
            "earnings": {
                "basic": s.basic,
                "hra": s.hra,
                "conveyance": s.conveyance,
                "medical": s.medical,
                "special_allowance": s.special_allowance,
                "gross_salary": s.gross_salary,
                "earned_salary": self.earned_salary,
            },
            "deductions": {
                "pf": s.pf,
                "professional_tax": s.professional_tax,
                "tds": s.tds,
                "total_deductions": self.deductions,
            },
            "net_salary": self.net_earned,
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass(frozen=True)
class PayrollRow:
    employee_id: str
    name: str
    department: Optional[str]
    designation: Optional[str]
    team: str
    profile_picture_url: Optional[str]
    gross_salary: float
    working_days: float
    earned_salary: float
    deductions: float
    net_salary: float
    error: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "employee_id": self.employee_id,
            "name": self.name,
            "department": self.department,
            "designation": self.designation,
            "team": self.team,
            "profile_picture_url": self.profile_picture_url,
            "gross_salary": self.gross_salary,
            "working_days": self.working_days,
            "earned_salary": self.earned_salary,
            "deductions": self.deductions,
            "net_salary": self.net_salary,
        }
        if self.error:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class PayrollSummary:
    total_employees: int = 0
    total_gross: float = 0.0
    total_earned: float = 0.0
    total_deductions: float = 0.0
    total_net: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "total_gross": self.total_gross,
            "total_earned": self.total_earned,
            "total_deductions": self.total_deductions,
            "total_net": self.total_net,
        }


@dataclass(frozen=True)
class PayrollReport:
    period: Period
    summary: PayrollSummary
    rows: list[PayrollRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "period": self.period.to_dict(),
            "summary": self.summary.to_dict(),
            "employees": [r.to_dict() for r in self.rows],
        }
