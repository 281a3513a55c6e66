import pytest

from conftest import make_user
from dayflow_hrms.core.enums import RequestStatus, Role, TeamMemberRole
from dayflow_hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from dayflow_hrms.teams.service import TeamService, parse_members


@pytest.fixture
def service(users_repo, teams_repo):
    users_repo.add(make_user("h1", role=Role.HR_OFFICER, full_name="Hana"))
    users_repo.add(make_user("u1", full_name="Uma"))
    users_repo.add(make_user("u2", full_name="Ravi"))
    return TeamService(teams_repo, users_repo)


def _team(service, **kw):
    return service.create_team(current_role=Role.HR_OFFICER, current_user_id="h1", team_name="Core", **kw)


def test_new_team_is_pending_and_led_by_creator(service):
    team = _team(service, members=["u1", {"user": "u2", "role": "Coordinator"}])

    assert team.status == RequestStatus.PENDING
    assert team.team_leader == "h1"
    assert [m.role for m in team.members] == [TeamMemberRole.MEMBER, TeamMemberRole.COORDINATOR]
    assert [t.id for t in service.list_pending(current_role=Role.ADMIN)] == [team.id]


def test_employees_cannot_create_teams(service):
    with pytest.raises(AuthorizationError):
        service.create_team(current_role=Role.EMPLOYEE, current_user_id="u1", team_name="Side")


def test_invalid_member_role_is_rejected():
    with pytest.raises(ValidationError):
        parse_members([{"user": "u1", "role": "Boss"}])


def test_approval_makes_team_assignable(service):
    team = _team(service)
    with pytest.raises(ValidationError):
        service.require_assignable(team.id)

    decided = service.decide_team(current_role=Role.ADMIN, current_user_id="a1", team_id=team.id, status="Approved")

    assert decided.status == RequestStatus.APPROVED
    assert decided.approved_by == "a1"
    assert service.require_assignable(team.id).id == team.id
    assert service.team_name(team.id) == "Core"


def test_rejection_keeps_reason(service):
    team = _team(service)

    decided = service.decide_team(
        current_role=Role.HR_OFFICER, current_user_id="h1", team_id=team.id, status="Rejected",
        rejection_reason="  duplicate  ",
    )

    assert decided.rejection_reason == "duplicate"
    with pytest.raises(ValidationError):
        service.decide_team(current_role=Role.ADMIN, current_user_id="a1", team_id=team.id, status="Pending")


def test_members_see_only_their_teams(service):
    mine = _team(service, members=["u1"])
    _team(service, members=["u2"])

    visible = service.list_teams(current_role=Role.EMPLOYEE, current_user_id="u1")

    assert [t.id for t in visible] == [mine.id]
    with pytest.raises(AuthorizationError):
        service.get_team(current_role=Role.EMPLOYEE, current_user_id="u2", team_id=mine.id)


def test_leader_can_update_members_but_others_cannot(service):
    team = _team(service, team_leader="u1")

    updated = service.update_members(current_role=Role.EMPLOYEE, current_user_id="u1", team_id=team.id, members=["u2"])
    assert updated.member_ids() == {"u2"}

    with pytest.raises(AuthorizationError):
        service.update_members(current_role=Role.EMPLOYEE, current_user_id="u2", team_id=team.id, members=[])


def test_view_expands_people(service):
    team = _team(service, members=["u1", "ghost"])

    view = service.to_view(team)

    assert view["created_by"]["full_name"] == "Hana"
    assert view["members"][0]["user"]["full_name"] == "Uma"
    assert view["members"][1]["user"] == {"_id": "ghost"}
    assert view["approved_by"] is None


def test_delete_team(service):
    team = _team(service)

    with pytest.raises(AuthorizationError):
        service.delete_team(current_role=Role.EMPLOYEE, current_user_id="u1", team_id=team.id)
    service.delete_team(current_role=Role.ADMIN, current_user_id="a1", team_id=team.id)
    with pytest.raises(NotFoundError):
        service.get_team(current_role=Role.ADMIN, current_user_id="a1", team_id=team.id)
