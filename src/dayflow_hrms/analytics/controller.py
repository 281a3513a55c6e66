from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_role, manager_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.analytics_service

    @app.get("/api/analytics/dashboard")
    @manager_required
    def dashboard():
        stats = service.dashboard(current_role=current_role())
        return jsonify({"success": True, "analytics": stats.to_dict()})

    @app.get("/api/analytics/employees")
    @manager_required
    def employee_analytics():
        rows = service.employee_stats(current_role=current_role())
        return jsonify({"success": True, "employees": [r.to_dict() for r in rows]})

    @app.get("/api/analytics/attendance-trends")
    @manager_required
    def attendance_trends():
        trends = service.attendance_trends(current_role=current_role(), days=request.args.get("days"))
        return jsonify({"success": True, "trends": trends})

    @app.get("/api/analytics/daily-data")
    @manager_required
    def daily_data():
        report = service.daily_data(current_role=current_role(), target_date=request.args.get("date"))
        out = {"success": True}
        out.update(report.to_dict())
        return jsonify(out)
