from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.company_service

    @app.get("/api/companies")
    @login_required
    def list_companies():
        companies = service.list_companies()
        return jsonify({"success": True, "count": len(companies), "companies": [c.to_dict() for c in companies]})

    @app.post("/api/companies")
    @login_required
    def create_company():
        data = json_body()
        company = service.create_company(
            company_name=data.get("company_name"),
            created_by=current_user_id(),
            description=data.get("description"),
            address=data.get("address"),
            phone=data.get("phone"),
            email=data.get("email"),
            website=data.get("website"),
        )
        return jsonify({"success": True, "company": company.to_dict()}), 201
