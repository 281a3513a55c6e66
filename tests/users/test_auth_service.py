import dataclasses
import re

import pytest
from werkzeug.security import generate_password_hash

from conftest import make_user
from dayflow_hrms.companies.service import CompanyService
from dayflow_hrms.core.enums import Role
from dayflow_hrms.core.exceptions import AuthenticationError, ValidationError
from dayflow_hrms.sync.model import MirrorCollection
from dayflow_hrms.users.service import AuthService, generate_password, next_employee_id


@pytest.fixture
def auth(users_repo, companies_repo, mirror):
    return AuthService(users_repo, companies_repo, CompanyService(companies_repo), mirror=mirror)


def _with_password(user, password):
    return dataclasses.replace(user, password_hash=generate_password_hash(password))


def test_login_by_email_or_employee_id(auth, users_repo):
    users_repo.add(_with_password(make_user("u1", employee_id="EMP0001", full_name="Jane"), "Secret@123"))

    by_email = auth.authenticate(email=" U1@example.com ", password="Secret@123")
    by_code = auth.authenticate(employee_id="EMP0001", password="Secret@123")

    assert by_email.user_id == by_code.user_id == "u1"
    assert by_email.to_dict()["role"] == "Employee"


def test_login_rejects_wrong_password_and_unknown_user(auth, users_repo):
    users_repo.add(_with_password(make_user("u1"), "Secret@123"))

    with pytest.raises(AuthenticationError):
        auth.authenticate(email="u1@example.com", password="nope")
    with pytest.raises(AuthenticationError):
        auth.authenticate(email="ghost@example.com", password="Secret@123")


def test_login_rejects_placeholder_hash(auth, users_repo):
    users_repo.add(dataclasses.replace(make_user("u1"), password_hash="not-a-hash"))

    with pytest.raises(AuthenticationError):
        auth.authenticate(email="u1@example.com", password="anything")


def test_login_requires_an_identifier(auth):
    with pytest.raises(ValidationError):
        auth.authenticate(password="Secret@123")


def test_first_registrant_becomes_admin_of_default_company(auth, companies_repo, mirror):
    s_user = auth.register(email="first@example.com", password="Secret@123", first_name="Ada", last_name="L")

    assert s_user.role == Role.ADMIN
    assert s_user.full_name == "Ada L"
    assert companies_repo.get_by_id(s_user.company_id).company_name == "Dayflow Inc."
    assert mirror.calls == [MirrorCollection.USERS]


def test_registering_with_company_name_founds_a_company(auth, users_repo, companies_repo):
    users_repo.add(make_user("u0"))

    s_user = auth.register(email="boss@example.com", password="Secret@123", company_name="Acme")

    company = companies_repo.get_by_id(s_user.company_id)
    assert s_user.role == Role.ADMIN
    assert company.company_code == "ACME"
    assert company.created_by == s_user.user_id


def test_joining_by_company_code_makes_an_employee(auth, users_repo):
    founder = auth.register(email="boss@example.com", password="Secret@123", company_name="Acme")

    joiner = auth.register(email="dev@example.com", password="Secret@123", company_code="acme")

    assert joiner.role == Role.EMPLOYEE
    assert joiner.company_id == founder.company_id
    assert founder.employee_id == "EMP0001"
    assert joiner.employee_id == "EMP0002"


def test_register_validates_input(auth):
    with pytest.raises(ValidationError):
        auth.register(email="dev@example.com", password="weak")
    with pytest.raises(ValidationError):
        auth.register(email="not-an-email", password="Secret@123")
    with pytest.raises(ValidationError):
        auth.register(email="dev@example.com", password="Secret@123", company_code="NOPE")


def test_duplicate_email_is_rejected(auth):
    auth.register(email="dev@example.com", password="Secret@123")

    with pytest.raises(ValidationError):
        auth.register(email="DEV@example.com", password="Secret@123")


def test_generated_password_meets_policy():
    for _ in range(20):
        pw = generate_password()
        assert len(pw) == 12
        assert re.search(r"[A-Z]", pw)
        assert re.search(r"[a-z]", pw)
        assert re.search(r"[0-9]", pw)
        assert re.search(r"[!@#$%^&*]", pw)


def test_next_employee_id_skips_taken_ids(users_repo):
    users_repo.add(make_user("u1", employee_id="EMP0002"))

    assert next_employee_id(users_repo, None) == "EMP0003"


def test_registration_issues_a_single_use_verification_token(auth, users_repo, mirror):
    s_user = auth.register(email="new@example.com", password="Secret@123")
    user = users_repo.get_by_id(s_user.user_id)

    assert user.email_verified is False
    assert re.fullmatch(r"[0-9a-f]{64}", user.email_verification_token)

    auth.verify_email(user.email_verification_token)

    verified = users_repo.get_by_id(s_user.user_id)
    assert verified.email_verified is True
    assert verified.email_verification_token is None
    assert mirror.calls[-1] == MirrorCollection.USERS
    with pytest.raises(ValidationError):
        auth.verify_email(user.email_verification_token)


def test_unknown_or_blank_verification_token_is_rejected(auth):
    with pytest.raises(ValidationError):
        auth.verify_email("deadbeef")
    with pytest.raises(ValidationError):
        auth.verify_email("  ")
