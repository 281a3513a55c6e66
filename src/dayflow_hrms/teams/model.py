from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus, TeamMemberRole


@dataclass(frozen=True)
class TeamMember:
    user_id: str
    role: TeamMemberRole = TeamMemberRole.MEMBER
    joined_at: Optional[datetime] = None


@dataclass(frozen=True)
class Team:
    """Domain entity: a team. Employees may only join Approved teams."""

    id: str
    team_name: str
    created_by: str
    status: RequestStatus
    description: Optional[str] = None
    team_leader: Optional[str] = None
    members: tuple[TeamMember, ...] = field(default_factory=tuple)
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    def member_ids(self) -> set[str]:
        return {m.user_id for m in self.members}

    def is_visible_to(self, user_id: str) -> bool:
        return user_id == self.created_by or user_id == self.team_leader or user_id in self.member_ids()


@dataclass(frozen=True)
class NewTeam:
    team_name: str
    created_by: str
    team_leader: Optional[str]
    members: tuple[TeamMember, ...]
    description: Optional[str] = None
