"""Flask glue shared by the controllers: session access, guards, JSON replies."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.session import AuthSession, SessionProvider
from .datetime_utils import parse_iso_date, parse_iso_datetime
from .query_keys import MutationResult

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)


def session_provider() -> SessionProvider:
    """One provider per request, over the Flask cookie session."""
    if "session_provider" not in g:
        provider = SessionProvider(session)
        provider.init()
        g.session_provider = provider
    return g.session_provider


def current_user() -> Optional[AuthSession]:
    return session_provider().current


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            raise AuthenticationError("Please sign in to continue")
        return view(*args, **kwargs)

    return wrapper


def hr_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            raise AuthenticationError("Please sign in to continue")
        if not user.role.is_staff_manager:
            raise AuthorizationError("You do not have permission")
        return view(*args, **kwargs)

    return wrapper


def body() -> dict:
    return request.get_json(silent=True) or {}


def date_arg(value: Any, field_name: str, *, required: bool = True) -> Optional[date]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def datetime_arg(value: Any, field_name: str, *, required: bool = True) -> Optional[datetime]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO timestamp")


def int_arg(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def _plain(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    payload: dict = {"success": True, "data": _plain(data)}
    if message:
        payload["message"] = message
    return jsonify(payload), status


def mutation_ok(result: MutationResult, data: Any = None, *, message: Optional[str] = None, status: int = 200):
    payload: dict = {
        "success": True,
        "data": _plain(data),
        "invalidates": sorted([list(map(str, key)) for key in result.invalidates]),
    }
    if message:
        payload["message"] = message
    return jsonify(payload), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(e, kind)), 400)
        return jsonify({"success": False, "message": str(e)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Flask routes HTTPException (404, 405, ...) here too
        code = getattr(e, "code", None)
        if isinstance(code, int) and code < 500:
            return jsonify({"success": False, "message": getattr(e, "description", str(e))}), code

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = f"Internal error: {e}" if app.config.get("DEBUG") else "Internal server error"
        return jsonify({"success": False, "message": message}), 500
