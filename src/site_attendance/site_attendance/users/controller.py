from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_role
from ..common.web import (
    SESSION_CODE,
    SESSION_EMPLOYEE_ID,
    SESSION_NAME,
    SESSION_ROLE,
    admin_required,
    current_employee_id,
    current_role,
    login_required,
    ok,
    request_data,
)
from ..container import Container


def _employee_to_ui(e) -> dict:
    return {
        "employee_id": e.employee_id,
        "employee_code": e.employee_code,
        "full_name": e.full_name,
        "username": e.username,
        "email": e.email,
        "phone": e.phone,
        "role": e.role.value,
        "date_of_joining": e.date_of_joining.strftime("%Y-%m-%d") if e.date_of_joining else None,
        "active": e.active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session[SESSION_EMPLOYEE_ID] = s_user.employee_id
        session[SESSION_NAME] = s_user.full_name
        session[SESSION_ROLE] = s_user.role.value
        session[SESSION_CODE] = s_user.employee_code

        return ok(
            "Signed in",
            employee_id=s_user.employee_id,
            full_name=s_user.full_name,
            role=s_user.role.value,
        )

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok("Signed out")

    @app.route("/me/password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = request_data()
        container.auth_service.change_password(
            current_employee_id(),
            data.get("current_password", ""),
            data.get("new_password", ""),
        )
        return ok("Password updated")

    @app.route("/admin/employees", methods=["GET"], endpoint="admin_employees")
    @admin_required
    def admin_employees():
        role_s = request.args.get("role")
        employees = container.user_service.list_employees(
            role=parse_role(role_s) if role_s else None,
            search=request.args.get("search"),
        )
        return ok(employees=[_employee_to_ui(e) for e in employees])

    @app.route("/admin/employees", methods=["POST"], endpoint="add_employee")
    @admin_required
    def add_employee():
        data = request_data()
        joined = (data.get("date_of_joining") or "").strip()
        employee_id = container.user_service.create_employee(
            current_role=current_role(),
            employee_code=data.get("employee_code", ""),
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=parse_role(data.get("role", "")),
            email=data.get("email"),
            phone=data.get("phone"),
            date_of_joining=parse_iso_date(joined) if joined else None,
        )
        return ok("Employee created", http_status=201, employee_id=employee_id)

    @app.route("/admin/employees/<int:employee_id>/delete", methods=["POST"], endpoint="delete_employee")
    @admin_required
    def delete_employee(employee_id: int):
        container.user_service.delete_employee(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            employee_id=employee_id,
        )
        return ok("Employee deleted")
