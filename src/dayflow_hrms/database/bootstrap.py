from __future__ import annotations

import logging
from datetime import date

from pymongo import ASCENDING
from werkzeug.security import generate_password_hash

from ..core.enums import Gender, MaritalStatus, Role
from ..users.model import NewUser, Profile, SalaryStructure
from ..users.repository import UserRepository
from .connection import DatabaseConnection
from .mongo_base import ATTENDANCE, COMPANIES, LEAVES, TEAMS, USERS, store_errors

logger = logging.getLogger(__name__)


def ensure_indexes(conn: DatabaseConnection) -> None:
    """Create the indexes the services rely on. Safe to run on every start."""
    db = conn.database()
    with store_errors("creating indexes"):
        db[USERS].create_index([("email", ASCENDING)], unique=True)
        db[USERS].create_index([("employee_id", ASCENDING)], unique=True)
        db[USERS].create_index([("email_verification_token", ASCENDING)], sparse=True)
        db[ATTENDANCE].create_index([("employee_id", ASCENDING), ("date", ASCENDING)], unique=True)
        db[LEAVES].create_index([("employee_id", ASCENDING), ("start_date", ASCENDING)])
        db[COMPANIES].create_index([("company_code", ASCENDING)], unique=True)
        db[COMPANIES].create_index([("company_name", ASCENDING)], unique=True)
        db[TEAMS].create_index([("members.user", ASCENDING)])


_DEMO_USERS = (
    (
        "ADMIN001",
        "admin@dayflow.com",
        "Admin@123",
        Role.ADMIN,
        Profile(
            full_name="System Administrator",
            first_name="System",
            last_name="Administrator",
            gender=Gender.MALE,
            marital_status=MaritalStatus.MARRIED,
            job_title="System Administrator",
            designation="Administrator",
            department="IT",
            date_of_joining=date(2020, 1, 1),
        ),
        SalaryStructure(basic=50000, hra=20000, conveyance=5000, medical=5000, special_allowance=20000,
                        pf=6000, professional_tax=200, tds=10000),
    ),
    (
        "HR001",
        "hr@dayflow.com",
        "HR@12345",
        Role.HR_OFFICER,
        Profile(
            full_name="Sarah Johnson",
            first_name="Sarah",
            last_name="Johnson",
            gender=Gender.FEMALE,
            marital_status=MaritalStatus.SINGLE,
            job_title="HR Manager",
            designation="HR Manager",
            department="Human Resources",
            date_of_joining=date(2021, 3, 15),
        ),
        SalaryStructure(basic=40000, hra=16000, conveyance=4000, medical=4000, special_allowance=16000,
                        pf=4800, professional_tax=200, tds=8000),
    ),
    (
        "EMP0001",
        "john.doe@dayflow.com",
        "Emp@1234",
        Role.EMPLOYEE,
        Profile(
            full_name="John Doe",
            first_name="John",
            last_name="Doe",
            gender=Gender.MALE,
            marital_status=MaritalStatus.MARRIED,
            job_title="Software Engineer",
            designation="Software Engineer",
            department="Engineering",
            date_of_joining=date(2022, 1, 10),
        ),
        SalaryStructure(basic=30000, hra=12000, conveyance=3000, medical=3000, special_allowance=12000,
                        pf=3600, professional_tax=200, tds=5000),
    ),
)


def ensure_demo_users(users: UserRepository) -> int:
    """Insert the demo Admin / HR / Employee accounts that are missing."""
    created = 0
    for employee_id, email, password, role, profile, salary in _DEMO_USERS:
        if users.get_by_email(email) or users.get_by_employee_id(employee_id):
            continue
        users.create_user(
            NewUser(
                employee_id=employee_id,
                email=email,
                password_hash=generate_password_hash(password),
                role=role,
                profile=profile,
                salary_structure=salary,
                email_verified=True,
            )
        )
        created += 1
    if created:
        logger.info("Seeded %d demo users", created)
    return created
