from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import current_role, login_required, manager_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.get("/api/payroll")
    @manager_required
    def payroll_overview():
        rows = service.payroll_overview(current_role=current_role())
        return jsonify({"success": True, "count": len(rows), "payroll": rows})

    @app.get("/api/payroll/salary-slip/<employee_id>")
    @login_required
    def salary_slip(employee_id: str):
        slip = service.salary_slip(
            current_role=current_role(),
            current_employee_id=session.get("employee_id", ""),
            employee_code=employee_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return jsonify({"success": True, "salary_slip": slip.to_dict()})

    @app.get("/api/payroll/report")
    @manager_required
    def payroll_report():
        report = service.payroll_report(
            current_role=current_role(),
            month=request.args.get("month"),
            year=request.args.get("year"),
            department=request.args.get("department"),
        )
        out = {"success": True}
        out.update(report.to_dict())
        return jsonify(out)
