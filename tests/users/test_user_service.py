from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import check_password_hash

from site_attendance.core.enums import Role
from site_attendance.core.exceptions import AuthenticationError, AuthorizationError, ValidationError


def test_authenticate_success(container, employees):
    emp = employees.add(role=Role.MANAGER, username="mai", full_name="Mai Tran", password="secret1")

    user = container.auth_service.authenticate("  mai ", "secret1")

    assert user.employee_id == emp.employee_id
    assert user.role == Role.MANAGER
    assert user.full_name == "Mai Tran"


@pytest.mark.parametrize("username, password", [("mai", "wrong"), ("nobody", "secret1"), ("", "")])
def test_authenticate_rejects_bad_credentials(container, employees, username, password):
    employees.add(username="mai", password="secret1")

    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        container.auth_service.authenticate(username, password)


def test_inactive_account_cannot_sign_in(container, employees):
    employees.add(username="gone", password="secret1", active=False)

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("gone", "secret1")


def test_change_password(container, employees):
    emp = employees.add(password="secret1")
    auth = container.auth_service

    with pytest.raises(AuthenticationError):
        auth.change_password(emp.employee_id, "nope", "brandnew")
    with pytest.raises(ValidationError):
        auth.change_password(emp.employee_id, "secret1", "short")

    auth.change_password(emp.employee_id, "secret1", "brandnew")
    assert check_password_hash(employees.get_by_id(emp.employee_id).password_hash, "brandnew")


def test_admin_creates_employee_with_placeholder_email(container, employees):
    employee_id = container.user_service.create_employee(
        current_role=Role.ADMIN,
        employee_code="FW-100",
        full_name="Binh Le",
        username="binh",
        password="secret1",
        role=Role.FIELD_WORKER,
        date_of_joining=date(2024, 1, 2),
    )

    created = employees.get_by_id(employee_id)
    assert created.email == "binh@temp.local"
    assert created.role == Role.FIELD_WORKER
    assert created.phone is None
    assert check_password_hash(created.password_hash, "secret1")


def test_create_employee_rules(container, employees):
    employees.add(username="taken", employee_code="FW-1")
    svc = container.user_service
    base = dict(
        current_role=Role.ADMIN,
        employee_code="FW-2",
        full_name="New Hire",
        username="fresh",
        password="secret1",
        role=Role.INTERN,
    )

    with pytest.raises(AuthorizationError):
        svc.create_employee(**{**base, "current_role": Role.MANAGER})
    with pytest.raises(ValidationError):
        svc.create_employee(**{**base, "username": "taken"})
    with pytest.raises(ValidationError):
        svc.create_employee(**{**base, "employee_code": "FW-1"})
    with pytest.raises(ValidationError):
        svc.create_employee(**{**base, "password": "12345"})
    with pytest.raises(ValidationError):
        svc.create_employee(**{**base, "role": "janitor"})


def test_delete_employee(container, employees):
    admin = employees.add(role=Role.ADMIN)
    worker = employees.add()
    svc = container.user_service

    with pytest.raises(ValidationError):
        svc.delete_employee(current_role=Role.ADMIN, current_employee_id=admin.employee_id, employee_id=admin.employee_id)
    with pytest.raises(AuthorizationError):
        svc.delete_employee(current_role=Role.MANAGER, current_employee_id=admin.employee_id, employee_id=worker.employee_id)

    svc.delete_employee(current_role=Role.ADMIN, current_employee_id=admin.employee_id, employee_id=worker.employee_id)
    assert employees.get_by_id(worker.employee_id) is None

    with pytest.raises(ValidationError):
        svc.delete_employee(current_role=Role.ADMIN, current_employee_id=admin.employee_id, employee_id=worker.employee_id)


def test_list_employees_filters(container, employees):
    employees.add(full_name="An Nguyen", employee_code="FW-01")
    employees.add(full_name="Bao Do", employee_code="OF-02", role=Role.OFFICE_EMPLOYEE)
    employees.add(full_name="Cuong Vo", employee_code="FW-03", active=False)
    svc = container.user_service

    assert [e.full_name for e in svc.list_employees()] == ["An Nguyen", "Bao Do"]
    assert [e.full_name for e in svc.list_employees(role=Role.OFFICE_EMPLOYEE)] == ["Bao Do"]
    assert [e.full_name for e in svc.list_employees(search="fw-")] == ["An Nguyen"]
    assert [e.full_name for e in svc.list_employees(search="bao")] == ["Bao Do"]
