from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import NewTeam, Team, TeamMember


class TeamRepository(Protocol):
    def create_team(self, new_team: NewTeam) -> str:
        raise NotImplementedError

    def get_by_id(self, team_id: str) -> Optional[Team]:
        raise NotImplementedError

    def list_teams(self, *, status: Optional[RequestStatus] = None) -> Sequence[Team]:
        """Newest first."""

        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[Team]:
        """Teams the user created, leads or belongs to; newest first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        team_id: str,
        status: RequestStatus,
        decided_by: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def replace_members(
        self,
        *,
        team_id: str,
        members: Optional[Sequence[TeamMember]] = None,
        team_leader: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def add_member(self, *, team_id: str, member: TeamMember) -> bool:
        raise NotImplementedError

    def delete_by_id(self, team_id: str) -> bool:
        raise NotImplementedError
