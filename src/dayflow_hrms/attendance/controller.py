from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.get("/api/attendance/today")
    @login_required
    def attendance_today():
        record = service.get_today_record(current_user_id())
        return jsonify(record.to_dict() if record else None)

    @app.post("/api/attendance/checkin")
    @login_required
    def check_in():
        record = service.check_in(current_user_id())
        return jsonify(record.to_dict()), 201

    @app.put("/api/attendance/checkout")
    @login_required
    def check_out():
        record = service.check_out(current_user_id())
        return jsonify(record.to_dict())

    @app.get("/api/attendance")
    @login_required
    def attendance_history():
        args = request.args
        records = service.history(
            current_role=current_role(),
            current_user_id=current_user_id(),
            employee_code=args.get("employeeId"),
            employee_ref=args.get("employee_id"),
            start_date=args.get("startDate"),
            end_date=args.get("endDate"),
            day=args.get("date"),
            month=args.get("month"),
        )
        return jsonify([r.to_dict() for r in records])
