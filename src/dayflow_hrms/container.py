from __future__ import annotations

from dataclasses import dataclass

from .analytics.service import AnalyticsService
from .attendance.mongo_attendance_repository import MongoAttendanceRepository
from .attendance.service import AttendanceService
from .companies.mongo_company_repository import MongoCompanyRepository
from .companies.service import CompanyService
from .core.constants import DEFAULT_STORE_TIMEOUT_MS
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mongo_leave_repository import MongoLeaveRepository
from .leaves.service import LeaveService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollService
from .sync.engine import MirrorSyncEngine
from .sync.model import MirrorTrigger, NullMirror
from .sync.scheduler import PeriodicSync
from .sync.source import MongoMirrorSource
from .teams.mongo_team_repository import MongoTeamRepository
from .teams.service import TeamService
from .users.mongo_user_repository import MongoUserRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MongoUserRepository
    companies_repo: MongoCompanyRepository
    teams_repo: MongoTeamRepository
    attendance_repo: MongoAttendanceRepository
    leaves_repo: MongoLeaveRepository

    mirror_engine: MirrorSyncEngine
    periodic_sync: PeriodicSync

    auth_service: AuthService
    employee_service: EmployeeService
    company_service: CompanyService
    team_service: TeamService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    analytics_service: AnalyticsService


def build_container(*, db_config: dict, mirror_data_dir: str, sync_enabled: bool = True) -> Container:
    config = DBConfig(
        uri=str(db_config["uri"]),
        database=str(db_config["database"]),
        timeout_ms=int(db_config.get("timeout_ms", DEFAULT_STORE_TIMEOUT_MS)),
    )
    conn = DatabaseConnection(config)

    users_repo = MongoUserRepository(conn)
    companies_repo = MongoCompanyRepository(conn)
    teams_repo = MongoTeamRepository(conn)
    attendance_repo = MongoAttendanceRepository(conn)
    leaves_repo = MongoLeaveRepository(conn)

    mirror_engine = MirrorSyncEngine(MongoMirrorSource(conn, max_time_ms=config.timeout_ms), mirror_data_dir)
    mirror: MirrorTrigger = mirror_engine if sync_enabled else NullMirror()

    company_service = CompanyService(companies_repo)
    team_service = TeamService(teams_repo, users_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        companies_repo=companies_repo,
        teams_repo=teams_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        mirror_engine=mirror_engine,
        periodic_sync=PeriodicSync(mirror_engine),
        auth_service=AuthService(users_repo, companies_repo, company_service, mirror=mirror),
        employee_service=EmployeeService(users_repo, team_service, mirror=mirror),
        company_service=company_service,
        team_service=team_service,
        attendance_service=AttendanceService(attendance_repo, users_repo, mirror=mirror),
        leave_service=LeaveService(leaves_repo, users_repo, mirror=mirror),
        payroll_service=PayrollService(
            users_repo,
            attendance_repo,
            leaves_repo,
            teams_repo,
            calculator=StandardPayrollCalculator(),
        ),
        analytics_service=AnalyticsService(users_repo, attendance_repo, leaves_repo),
    )
