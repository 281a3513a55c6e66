from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from pymongo import DESCENDING

from ..common.datetime_utils import now_local
from ..core.enums import RequestStatus, TeamMemberRole
from ..database.connection import DatabaseConnection
from ..database.mongo_base import TEAMS, id_str, store_errors, to_object_id
from .model import NewTeam, Team, TeamMember
from .repository import TeamRepository


def _member_to_doc(member: TeamMember) -> dict:
    return {
        "user": to_object_id(member.user_id),
        "role": member.role.value,
        "joined_at": member.joined_at or now_local(),
    }


def team_from_doc(doc: dict) -> Team:
    members = tuple(
        TeamMember(
            user_id=str(m["user"]),
            role=TeamMemberRole(m.get("role") or TeamMemberRole.MEMBER.value),
            joined_at=m.get("joined_at"),
        )
        for m in doc.get("members") or []
    )
    return Team(
        id=str(doc["_id"]),
        team_name=doc["team_name"],
        created_by=id_str(doc.get("created_by")) or "",
        status=RequestStatus(doc.get("status") or RequestStatus.PENDING.value),
        description=doc.get("description"),
        team_leader=id_str(doc.get("team_leader")),
        members=members,
        approved_by=id_str(doc.get("approved_by")),
        approved_at=doc.get("approved_at"),
        rejection_reason=doc.get("rejection_reason"),
        created_at=doc.get("createdAt"),
    )


class MongoTeamRepository(TeamRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.database()[TEAMS]

    def _find(self, query: dict, action: str) -> list[Team]:
        with store_errors(action):
            docs = list(self._col.find(query).sort("createdAt", DESCENDING))
        return [team_from_doc(d) for d in docs]

    def create_team(self, new_team: NewTeam) -> str:
        now = now_local()
        doc = {
            "team_name": new_team.team_name,
            "description": new_team.description,
            "created_by": to_object_id(new_team.created_by),
            "team_leader": to_object_id(new_team.team_leader),
            "members": [_member_to_doc(m) for m in new_team.members],
            "status": RequestStatus.PENDING.value,
            "createdAt": now,
            "updatedAt": now,
        }
        with store_errors("creating team"):
            return str(self._col.insert_one(doc).inserted_id)

    def get_by_id(self, team_id: str) -> Optional[Team]:
        oid = to_object_id(team_id)
        if oid is None:
            return None
        with store_errors("loading team"):
            doc = self._col.find_one({"_id": oid})
        return team_from_doc(doc) if doc else None

    def list_teams(self, *, status: Optional[RequestStatus] = None) -> Sequence[Team]:
        query = {"status": status.value} if status else {}
        return self._find(query, "listing teams")

    def list_for_user(self, user_id: str) -> Sequence[Team]:
        oid = to_object_id(user_id)
        query = {"$or": [{"created_by": oid}, {"members.user": oid}, {"team_leader": oid}]}
        return self._find(query, "listing teams for user")

    def _update(self, team_id: str, update: dict, action: str) -> bool:
        oid = to_object_id(team_id)
        if oid is None:
            return False
        update.setdefault("$set", {})["updatedAt"] = now_local()
        with store_errors(action):
            return self._col.update_one({"_id": oid}, update).matched_count > 0

    def decide(
        self,
        *,
        team_id: str,
        status: RequestStatus,
        decided_by: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        changes: dict[str, Any] = {
            "status": status.value,
            "approved_by": to_object_id(decided_by),
            "approved_at": decided_at,
        }
        if rejection_reason:
            changes["rejection_reason"] = rejection_reason
        return self._update(team_id, {"$set": changes}, "deciding team")

    def replace_members(
        self,
        *,
        team_id: str,
        members: Optional[Sequence[TeamMember]] = None,
        team_leader: Optional[str] = None,
    ) -> bool:
        changes: dict[str, Any] = {}
        if members is not None:
            changes["members"] = [_member_to_doc(m) for m in members]
        if team_leader:
            changes["team_leader"] = to_object_id(team_leader)
        return self._update(team_id, {"$set": changes}, "updating team members")

    def add_member(self, *, team_id: str, member: TeamMember) -> bool:
        return self._update(team_id, {"$push": {"members": _member_to_doc(member)}}, "adding team member")

    def delete_by_id(self, team_id: str) -> bool:
        oid = to_object_id(team_id)
        if oid is None:
            return False
        with store_errors("deleting team"):
            return self._col.delete_one({"_id": oid}).deleted_count > 0
