from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, json_body, login_required, manager_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.post("/api/leaves")
    @login_required
    def create_leave():
        data = json_body()
        leave = service.create_leave(
            user_id=current_user_id(),
            leave_type=data.get("leave_type"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            reason=data.get("reason"),
            attachment_url=data.get("attachment_url"),
        )
        return jsonify(leave.to_dict()), 201

    @app.get("/api/leaves/my-status")
    @login_required
    def my_leaves():
        return jsonify([lv.to_dict() for lv in service.my_leaves(user_id=current_user_id())])

    @app.get("/api/leaves")
    @manager_required
    def list_leaves():
        args = request.args
        leaves = service.list_leaves(
            current_role=current_role(),
            status=args.get("status"),
            employee_code=args.get("employeeId"),
            employee_ref=args.get("employee_id"),
            start_date=args.get("startDate"),
            end_date=args.get("endDate"),
        )
        return jsonify([lv.to_dict() for lv in leaves])

    @app.put("/api/leaves/<leave_id>/status")
    @manager_required
    def decide_leave(leave_id: str):
        data = json_body()
        leave = service.decide_leave(
            current_role=current_role(),
            leave_id=leave_id,
            status=data.get("status") or "",
            admin_remarks=data.get("admin_remarks"),
        )
        return jsonify(leave.to_dict())
