"""In-memory repositories shared by the service and controller tests."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Optional

import pytest

from dayflow_hrms.attendance.model import AttendanceRecord
from dayflow_hrms.companies.model import Company
from dayflow_hrms.core.enums import RequestStatus, Role
from dayflow_hrms.core.exceptions import ValidationError
from dayflow_hrms.leaves.model import LeaveRequest
from dayflow_hrms.teams.model import Team
from dayflow_hrms.users.model import EmployeeRef, Profile, SalaryStructure, User

FIXED_NOW = datetime(2024, 3, 15, 9, 0, 0)


class InMemoryUserRepo:
    def __init__(self):
        self._users: dict[str, User] = {}
        self._next_id = 1

    def _new_id(self) -> str:
        uid = f"u{self._next_id}"
        self._next_id += 1
        return uid

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def get_by_id(self, user_id):
        return self._users.get(user_id)

    def get_by_email(self, email):
        return next((u for u in self._users.values() if u.email == email), None)

    def get_by_employee_id(self, employee_id):
        return next((u for u in self._users.values() if u.employee_id == employee_id), None)

    def create_user(self, new_user):
        uid = self._new_id()
        self._users[uid] = User(
            id=uid,
            employee_id=new_user.employee_id,
            email=new_user.email,
            password_hash=new_user.password_hash,
            role=new_user.role,
            profile=new_user.profile,
            salary_structure=new_user.salary_structure,
            team_id=new_user.team_id,
            company_id=new_user.company_id,
            email_verified=new_user.email_verified,
            email_verification_token=new_user.email_verification_token,
            created_at=FIXED_NOW,
        )
        return uid

    def _replace(self, user_id, **changes) -> bool:
        if user_id not in self._users:
            return False
        self._users[user_id] = dataclasses.replace(self._users[user_id], **changes)
        return True

    def update_profile(self, user_id, profile):
        return self._replace(user_id, profile=profile)

    def update_salary_structure(self, user_id, salary):
        return self._replace(user_id, salary_structure=salary)

    def set_team(self, user_id, team_id):
        return self._replace(user_id, team_id=team_id)

    def get_by_verification_token(self, token):
        return next((u for u in self._users.values() if token and u.email_verification_token == token), None)

    def mark_email_verified(self, user_id):
        return self._replace(user_id, email_verified=True, email_verification_token=None)

    def delete_by_id(self, user_id):
        return self._users.pop(user_id, None) is not None

    def _matching(self, role=None, department=None, company_id=None):
        for u in self._users.values():
            if role is not None and u.role != role:
                continue
            if department and u.department != department:
                continue
            if company_id and u.company_id != company_id:
                continue
            yield u

    def list_users(self, *, role=None, department=None, company_id=None):
        users = list(self._matching(role, department, company_id))
        return sorted(users, key=lambda u: (u.department or "", u.full_name))

    def count(self, *, role=None, company_id=None):
        return sum(1 for _ in self._matching(role, None, company_id))


class InMemoryCompanyRepo:
    def __init__(self):
        self._companies: dict[str, Company] = {}

    def get_by_id(self, company_id):
        return self._companies.get(company_id)

    def get_by_name(self, company_name):
        return next((c for c in self._companies.values() if c.company_name == company_name), None)

    def get_by_code(self, company_code):
        return next((c for c in self._companies.values() if c.company_code == company_code), None)

    def get_oldest(self):
        return next(iter(self._companies.values()), None)

    def code_exists(self, company_code):
        return self.get_by_code(company_code) is not None

    def create_company(self, new_company):
        if self.code_exists(new_company.company_code):
            raise ValidationError("Company name or code already exists")
        cid = f"c{len(self._companies) + 1}"
        self._companies[cid] = Company(
            id=cid,
            company_name=new_company.company_name,
            company_code=new_company.company_code,
            description=new_company.description,
            email=new_company.email,
            created_by=new_company.created_by,
            created_at=FIXED_NOW,
        )
        return cid

    def set_created_by(self, company_id, user_id):
        if company_id not in self._companies:
            return False
        self._companies[company_id] = dataclasses.replace(self._companies[company_id], created_by=user_id)
        return True

    def list_active(self):
        return sorted((c for c in self._companies.values() if c.is_active), key=lambda c: c.company_name)


class InMemoryTeamRepo:
    def __init__(self):
        self._teams: dict[str, Team] = {}

    def add(self, team: Team) -> Team:
        self._teams[team.id] = team
        return team

    def create_team(self, new_team):
        tid = f"t{len(self._teams) + 1}"
        self._teams[tid] = Team(
            id=tid,
            team_name=new_team.team_name,
            created_by=new_team.created_by,
            status=RequestStatus.PENDING,
            description=new_team.description,
            team_leader=new_team.team_leader,
            members=tuple(new_team.members),
            created_at=FIXED_NOW,
        )
        return tid

    def get_by_id(self, team_id):
        return self._teams.get(team_id)

    def list_teams(self, *, status=None):
        teams = [t for t in self._teams.values() if status is None or t.status == status]
        return list(reversed(teams))

    def list_for_user(self, user_id):
        return [t for t in reversed(list(self._teams.values())) if t.is_visible_to(user_id)]

    def decide(self, *, team_id, status, decided_by, decided_at, rejection_reason=None):
        if team_id not in self._teams:
            return False
        self._teams[team_id] = dataclasses.replace(
            self._teams[team_id],
            status=status,
            approved_by=decided_by,
            approved_at=decided_at,
            rejection_reason=rejection_reason,
        )
        return True

    def replace_members(self, *, team_id, members=None, team_leader=None):
        team = self._teams.get(team_id)
        if not team:
            return False
        changes = {}
        if members is not None:
            changes["members"] = tuple(members)
        if team_leader:
            changes["team_leader"] = team_leader
        self._teams[team_id] = dataclasses.replace(team, **changes)
        return True

    def add_member(self, *, team_id, member):
        team = self._teams.get(team_id)
        if not team:
            return False
        self._teams[team_id] = dataclasses.replace(team, members=team.members + (member,))
        return True

    def delete_by_id(self, team_id):
        return self._teams.pop(team_id, None) is not None


class InMemoryAttendanceRepo:
    def __init__(self, users: Optional[InMemoryUserRepo] = None):
        self._records: dict[str, AttendanceRecord] = {}
        self._users = users

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._records[record.id] = record
        return record

    def _with_employee(self, record: AttendanceRecord) -> AttendanceRecord:
        user = self._users.get_by_id(record.employee_id) if self._users else None
        if not user:
            return record
        ref = EmployeeRef(id=user.id, employee_id=user.employee_id, full_name=user.full_name,
                          department=user.department, email=user.email)
        return dataclasses.replace(record, employee=ref)

    def get_for_employee_and_date(self, employee_id, date_key):
        return next(
            (r for r in self._records.values() if r.employee_id == employee_id and r.date == date_key),
            None,
        )

    def create_checkin(self, *, employee_id, date_key, check_in, status):
        if self.get_for_employee_and_date(employee_id, date_key):
            raise ValidationError("Already checked in today")
        rid = f"a{len(self._records) + 1}"
        self._records[rid] = AttendanceRecord(
            id=rid, employee_id=employee_id, date=date_key, status=status, check_in=check_in, created_at=check_in
        )
        return rid

    def update_checkout(self, *, attendance_id, check_out, total_hours):
        if attendance_id not in self._records:
            return False
        self._records[attendance_id] = dataclasses.replace(
            self._records[attendance_id], check_out=check_out, total_hours=total_hours
        )
        return True

    def list_records(self, *, employee_id=None, date_from=None, date_to=None, status=None, with_employee=False):
        out = []
        for r in self._records.values():
            if employee_id and r.employee_id != employee_id:
                continue
            if date_from and r.date < date_from:
                continue
            if date_to and r.date > date_to:
                continue
            if status is not None and r.status != status:
                continue
            out.append(self._with_employee(r) if with_employee else r)
        return sorted(out, key=lambda r: r.date, reverse=True)

    def list_recent(self, limit):
        return list(reversed(list(self._records.values())))[:limit]


class InMemoryLeaveRepo:
    def __init__(self):
        self._leaves: dict[str, LeaveRequest] = {}

    def add(self, leave: LeaveRequest) -> LeaveRequest:
        self._leaves[leave.id] = leave
        return leave

    def create_leave(self, new_leave):
        lid = f"l{len(self._leaves) + 1}"
        self._leaves[lid] = LeaveRequest(
            id=lid,
            employee_id=new_leave.employee_id,
            leave_type=new_leave.leave_type,
            start_date=new_leave.start_date,
            end_date=new_leave.end_date,
            reason=new_leave.reason,
            status=RequestStatus.PENDING,
            attachment_url=new_leave.attachment_url,
            created_at=FIXED_NOW,
        )
        return lid

    def get_by_id(self, leave_id):
        return self._leaves.get(leave_id)

    def list_leaves(self, *, employee_id=None, status=None, overlapping=None, with_employee=False):
        out = []
        for lv in reversed(list(self._leaves.values())):
            if employee_id and lv.employee_id != employee_id:
                continue
            if status is not None and lv.status != status:
                continue
            if overlapping and (lv.start_date > overlapping[1] or lv.end_date < overlapping[0]):
                continue
            out.append(lv)
        return out

    def decide(self, *, leave_id, status, admin_remarks=None):
        lv = self._leaves.get(leave_id)
        if not lv or lv.status != RequestStatus.PENDING:
            return False
        self._leaves[leave_id] = dataclasses.replace(lv, status=status, admin_remarks=admin_remarks)
        return True


class RecordingMirror:
    def __init__(self):
        self.calls = []

    def sync_collection(self, name):
        self.calls.append(name)
        return True


def make_user(
    uid: str,
    *,
    employee_id: Optional[str] = None,
    role: Role = Role.EMPLOYEE,
    full_name: str = "Test User",
    department: Optional[str] = "Engineering",
    salary: Optional[SalaryStructure] = None,
    team_id: Optional[str] = None,
    **profile_fields,
) -> User:
    return User(
        id=uid,
        employee_id=employee_id or uid.upper(),
        email=f"{uid}@example.com",
        password_hash="",
        role=role,
        profile=Profile(full_name=full_name, department=department, **profile_fields),
        salary_structure=salary,
        team_id=team_id,
    )


@pytest.fixture
def users_repo():
    return InMemoryUserRepo()


@pytest.fixture
def companies_repo():
    return InMemoryCompanyRepo()


@pytest.fixture
def teams_repo():
    return InMemoryTeamRepo()


@pytest.fixture
def attendance_repo(users_repo):
    return InMemoryAttendanceRepo(users_repo)


@pytest.fixture
def leaves_repo():
    return InMemoryLeaveRepo()


@pytest.fixture
def mirror():
    return RecordingMirror()
