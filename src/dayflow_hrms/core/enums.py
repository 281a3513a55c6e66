from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "Admin"
    HR_OFFICER = "HR Officer"
    EMPLOYEE = "Employee"


MANAGER_ROLES = frozenset({Role.ADMIN, Role.HR_OFFICER})


class AttendanceStatus(str, Enum):
    """Attendance status stored per (employee, date)."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HALF_DAY = "Half-day"
    LEAVE = "Leave"


class LeaveType(str, Enum):
    PAID = "Paid"
    SICK = "Sick"
    UNPAID = "Unpaid"


PAID_LEAVE_TYPES = frozenset({LeaveType.PAID, LeaveType.SICK})


class RequestStatus(str, Enum):
    """Approval workflow status (leave requests and teams)."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TeamMemberRole(str, Enum):
    TEAM_LEADER = "Team Leader"
    MEMBER = "Member"
    COORDINATOR = "Coordinator"
    CONTRIBUTOR = "Contributor"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"
    DIVORCED = "Divorced"
    WIDOWED = "Widowed"
