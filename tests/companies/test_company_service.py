import pytest

from dayflow_hrms.companies.service import CompanyService, generate_company_code
from dayflow_hrms.core.exceptions import ValidationError


def test_code_is_uppercased_alphanumeric_prefix():
    assert generate_company_code("Acme Corp, Ltd.", lambda code: False) == "ACMECO"


def test_code_collision_appends_counter():
    taken = {"ACMECO", "ACMECO1"}

    assert generate_company_code("Acme Corporation", taken.__contains__) == "ACMECO2"


def test_short_names_keep_their_full_code():
    assert generate_company_code("hr 1", lambda code: False) == "HR1"


def test_name_without_letters_is_rejected():
    with pytest.raises(ValidationError):
        generate_company_code("!!!", lambda code: False)


def test_create_company_generates_unique_codes(companies_repo):
    service = CompanyService(companies_repo)

    first = service.create_company(company_name="Dayflow")
    second = service.create_company(company_name="Dayflow Labs")

    assert first.company_code == "DAYFLO"
    assert second.company_code == "DAYFLO1"
    assert [c.company_name for c in service.list_companies()] == ["Dayflow", "Dayflow Labs"]


def test_duplicate_company_name_is_rejected(companies_repo):
    service = CompanyService(companies_repo)
    service.create_company(company_name="Dayflow")

    with pytest.raises(ValidationError):
        service.create_company(company_name="Dayflow")
