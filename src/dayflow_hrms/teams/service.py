from __future__ import annotations

from typing import Any, Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import MANAGER_ROLES, RequestStatus, Role, TeamMemberRole
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import NewTeam, Team, TeamMember
from .repository import TeamRepository


def parse_members(raw: Optional[Iterable[Any]]) -> tuple[TeamMember, ...]:
    """Accept plain user ids or ``{"user": id, "role": ...}`` objects."""
    out: list[TeamMember] = []
    for item in raw or []:
        if isinstance(item, dict):
            user_id = item.get("user")
            role_s = item.get("role") or TeamMemberRole.MEMBER.value
        else:
            user_id, role_s = item, TeamMemberRole.MEMBER.value
        if not user_id:
            raise ValidationError("Team member is missing a user")
        try:
            role = TeamMemberRole(role_s)
        except ValueError:
            raise ValidationError(f"Invalid team role: {role_s}")
        out.append(TeamMember(user_id=str(user_id), role=role))
    return tuple(out)


class TeamService:
    def __init__(self, teams: TeamRepository, users: UserRepository):
        self._teams = teams
        self._users = users

    def _require(self, team_id: str) -> Team:
        team = self._teams.get_by_id(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team

    def create_team(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        team_name: str,
        description: Optional[str] = None,
        members: Optional[Iterable[Any]] = None,
        team_leader: Optional[str] = None,
    ) -> Team:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Only Admin/HR can create teams")

        name = require_non_empty(team_name, "Team name")
        team_id = self._teams.create_team(
            NewTeam(
                team_name=name,
                description=description,
                created_by=current_user_id,
                team_leader=team_leader or current_user_id,
                members=parse_members(members),
            )
        )
        return self._require(team_id)

    def list_teams(self, *, current_role: Role, current_user_id: str):
        if current_role in MANAGER_ROLES:
            return self._teams.list_teams()
        return self._teams.list_for_user(current_user_id)

    def list_pending(self, *, current_role: Role):
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized")
        return self._teams.list_teams(status=RequestStatus.PENDING)

    def decide_team(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        team_id: str,
        status: str,
        rejection_reason: Optional[str] = None,
    ) -> Team:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Not authorized")
        if status not in (RequestStatus.APPROVED.value, RequestStatus.REJECTED.value):
            raise ValidationError("Invalid status")

        self._require(team_id)
        decision = RequestStatus(status)
        reason = None
        if decision == RequestStatus.REJECTED:
            reason = (rejection_reason or "").strip() or None
        self._teams.decide(
            team_id=team_id,
            status=decision,
            decided_by=current_user_id,
            decided_at=now_local(),
            rejection_reason=reason,
        )
        return self._require(team_id)

    def get_team(self, *, current_role: Role, current_user_id: str, team_id: str) -> Team:
        team = self._require(team_id)
        if current_role not in MANAGER_ROLES and not team.is_visible_to(current_user_id):
            raise AuthorizationError("Not authorized to view this team")
        return team

    def update_members(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        team_id: str,
        members: Optional[Iterable[Any]] = None,
        team_leader: Optional[str] = None,
    ) -> Team:
        team = self._require(team_id)
        can_edit = (
            current_role in MANAGER_ROLES
            or team.created_by == current_user_id
            or team.team_leader == current_user_id
        )
        if not can_edit:
            raise AuthorizationError("Not authorized to update this team")

        self._teams.replace_members(
            team_id=team_id,
            members=parse_members(members) if members is not None else None,
            team_leader=team_leader,
        )
        return self._require(team_id)

    def delete_team(self, *, current_role: Role, current_user_id: str, team_id: str) -> None:
        team = self._require(team_id)
        if current_role not in MANAGER_ROLES and team.created_by != current_user_id:
            raise AuthorizationError("Not authorized to delete this team")
        if not self._teams.delete_by_id(team_id):
            raise ValidationError("Deleting team failed")

    def require_assignable(self, team_id: str) -> Team:
        """Employees can only be assigned to approved teams."""
        team = self._teams.get_by_id(team_id)
        if not team:
            raise ValidationError("Team not found")
        if team.status != RequestStatus.APPROVED:
            raise ValidationError("Can only assign employees to approved teams")
        return team

    def add_member(self, *, team_id: str, user_id: str) -> None:
        self._teams.add_member(
            team_id=team_id,
            member=TeamMember(user_id=user_id, role=TeamMemberRole.MEMBER, joined_at=now_local()),
        )

    def team_name(self, team_id: Optional[str]) -> Optional[str]:
        if not team_id:
            return None
        team = self._teams.get_by_id(team_id)
        return team.team_name if team else None

    def to_view(self, team: Team) -> dict:
        def person(user_id: Optional[str]) -> Optional[dict]:
            if not user_id:
                return None
            user = self._users.get_by_id(user_id)
            if not user:
                return {"_id": user_id}
            return {
                "_id": user.id,
                "employee_id": user.employee_id,
                "email": user.email,
                "full_name": user.full_name,
                "department": user.department,
                "designation": user.profile.designation,
            }

        return {
            "_id": team.id,
            "team_name": team.team_name,
            "description": team.description,
            "status": team.status.value,
            "created_by": person(team.created_by),
            "team_leader": person(team.team_leader),
            "members": [
                {
                    "user": person(m.user_id),
                    "role": m.role.value,
                    "joined_at": m.joined_at.isoformat() if m.joined_at else None,
                }
                for m in team.members
            ],
            "approved_by": person(team.approved_by),
            "approved_at": team.approved_at.isoformat() if team.approved_at else None,
            "rejection_reason": team.rejection_reason,
            "createdAt": team.created_at.isoformat() if team.created_at else None,
        }
