from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_role, current_user_id, json_body, login_required, manager_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.team_service

    @app.post("/api/teams")
    @manager_required
    def create_team():
        data = json_body()
        team = service.create_team(
            current_role=current_role(),
            current_user_id=current_user_id(),
            team_name=data.get("team_name"),
            description=data.get("description"),
            members=data.get("members"),
            team_leader=data.get("team_leader"),
        )
        return jsonify({"success": True, "team": service.to_view(team)}), 201

    @app.get("/api/teams")
    @login_required
    def list_teams():
        teams = service.list_teams(current_role=current_role(), current_user_id=current_user_id())
        return jsonify({"success": True, "teams": [service.to_view(t) for t in teams]})

    @app.get("/api/teams/pending")
    @manager_required
    def pending_teams():
        teams = service.list_pending(current_role=current_role())
        return jsonify({"success": True, "teams": [service.to_view(t) for t in teams]})

    @app.put("/api/teams/<team_id>/status")
    @manager_required
    def decide_team(team_id: str):
        data = json_body()
        team = service.decide_team(
            current_role=current_role(),
            current_user_id=current_user_id(),
            team_id=team_id,
            status=data.get("status") or "",
            rejection_reason=data.get("rejection_reason"),
        )
        return jsonify({"success": True, "team": service.to_view(team)})

    @app.get("/api/teams/<team_id>")
    @login_required
    def get_team(team_id: str):
        team = service.get_team(current_role=current_role(), current_user_id=current_user_id(), team_id=team_id)
        return jsonify({"success": True, "team": service.to_view(team)})

    @app.put("/api/teams/<team_id>/members")
    @login_required
    def update_members(team_id: str):
        data = json_body()
        team = service.update_members(
            current_role=current_role(),
            current_user_id=current_user_id(),
            team_id=team_id,
            members=data.get("members"),
            team_leader=data.get("team_leader"),
        )
        return jsonify({"success": True, "team": service.to_view(team)})

    @app.delete("/api/teams/<team_id>")
    @login_required
    def delete_team(team_id: str):
        service.delete_team(current_role=current_role(), current_user_id=current_user_id(), team_id=team_id)
        return jsonify({"success": True, "message": "Team deleted successfully"})
