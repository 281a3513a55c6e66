from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    json_body,
    login_required,
    manager_required,
)
from ..container import Container
from .service import SessionUser, user_view


def _start_session(s_user: SessionUser) -> None:
    session.clear()
    session["user_id"] = s_user.user_id
    session["employee_id"] = s_user.employee_id
    session["name"] = s_user.full_name
    session["role"] = s_user.role.value
    session["company_id"] = s_user.company_id


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    employees = container.employee_service

    @app.post("/api/auth/login")
    def login():
        data = json_body()
        s_user = auth.authenticate(
            email=data.get("email"),
            employee_id=data.get("employee_id"),
            password=data.get("password") or "",
        )
        _start_session(s_user)
        return jsonify(s_user.to_dict())

    @app.post("/api/auth/register")
    def register_user():
        data = json_body()
        s_user = auth.register(
            email=data.get("email"),
            password=data.get("password"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            gender=data.get("gender"),
            employee_id=data.get("employee_id"),
            company_name=data.get("company_name"),
            company_code=data.get("company_code"),
            profile_picture=data.get("profile_picture"),
        )
        _start_session(s_user)
        out = s_user.to_dict()
        out["email_verified"] = False
        out["message"] = "Registration successful. Please verify your email."
        return jsonify(out), 201

    @app.get("/api/auth/verify-email/<token>")
    def verify_email(token: str):
        auth.verify_email(token)
        return jsonify({"message": "Email verified successfully"})

    @app.post("/api/auth/logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})

    @app.get("/api/users/profile")
    @login_required
    def get_profile():
        return jsonify(user_view(employees.get_profile(current_user_id())))

    @app.put("/api/users/profile")
    @login_required
    def update_profile():
        user = employees.update_own_profile(user_id=current_user_id(), payload=json_body())
        return jsonify(user_view(user))

    @app.get("/api/users")
    @manager_required
    def list_users():
        return jsonify([user_view(u) for u in employees.list_users(current_role=current_role())])

    @app.get("/api/users/<user_id>")
    @manager_required
    def get_user(user_id: str):
        return jsonify(user_view(employees.get_user(current_role=current_role(), user_id=user_id)))

    @app.put("/api/users/<user_id>")
    @manager_required
    def update_user(user_id: str):
        data = json_body()
        user = employees.update_user(
            current_role=current_role(),
            user_id=user_id,
            profile=data.get("profile"),
            salary_structure=data.get("salary_structure"),
        )
        return jsonify(user_view(user))

    @app.delete("/api/users/<user_id>")
    @admin_required
    def delete_user(user_id: str):
        employees.delete_user(current_role=current_role(), current_user_id=current_user_id(), user_id=user_id)
        return jsonify({"success": True, "message": "User deleted successfully"})

    @app.post("/api/employees")
    @manager_required
    def create_employee():
        data = json_body()
        created = employees.create_employee(
            current_role=current_role(),
            current_company_id=session.get("company_id"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            email=data.get("email"),
            department=data.get("department"),
            designation=data.get("designation"),
            role=data.get("role") or "Employee",
            phone=data.get("phone"),
            date_of_joining=data.get("date_of_joining"),
            gender=data.get("gender"),
            salary_structure=data.get("salary_structure"),
            team=data.get("team"),
            password=data.get("password"),
        )
        out = {"success": True, "message": "Employee created successfully"}
        out.update(created.to_dict())
        return jsonify(out), 201

    @app.get("/api/employees")
    @login_required
    def list_employees():
        rows = [
            {
                "_id": u.id,
                "employee_id": u.employee_id,
                "email": u.email,
                "profile": {
                    "full_name": u.full_name,
                    "department": u.department,
                    "designation": u.profile.designation,
                    "phone": u.profile.phone,
                    "profile_picture_url": u.profile.profile_picture_url,
                },
            }
            for u in employees.list_employees()
        ]
        return jsonify({"success": True, "count": len(rows), "employees": rows})

    @app.get("/api/employees/stats")
    @manager_required
    def employee_stats():
        stats = container.analytics_service.workforce_stats(current_role=current_role())
        return jsonify({"success": True, "stats": stats})
