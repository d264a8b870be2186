"""Flask helpers shared by the feature controllers: session guards, JSON replies, error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DataFetchError,
    DomainError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SESSION_EMPLOYEE_ID = "employee_id"
SESSION_ROLE = "role"
SESSION_NAME = "name"
SESSION_CODE = "employee_code"


def ok(message: str = "OK", *, http_status: int = 200, **payload):
    body = {"success": True, "message": message}
    body.update(payload)
    return jsonify(body), http_status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_employee_id() -> int:
    return int(session[SESSION_EMPLOYEE_ID])


def current_role() -> Role:
    return Role(session[SESSION_ROLE])


def request_data() -> dict:
    """JSON body if present, form fields otherwise."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if SESSION_EMPLOYEE_ID not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(roles: Iterable[Role]):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if SESSION_EMPLOYEE_ID not in session:
                return fail("Please sign in to continue", 401)
            if session.get(SESSION_ROLE) not in allowed:
                return fail("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required({Role.ADMIN})


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(DataFetchError)
    def _data_fetch(e: DataFetchError):
        logger.error("Data fetch failed on %s: %s", request.path, e)
        return fail("Could not load data, please retry", 502)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s", request.path)
        return fail("Internal server error", 500)
