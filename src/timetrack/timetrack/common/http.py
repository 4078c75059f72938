from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .serialization import to_jsonable

logger = logging.getLogger(__name__)

COMPANY_HEADER = "X-Company-Id"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def ok(data: Any = None, message: str = "", status: int = 200):
    return jsonify({"success": True, "data": to_jsonable(data), "message": message}), status


def fail(message: str, status: int, error: Optional[str] = None):
    return jsonify({"success": False, "message": message, "error": error or message}), status


def current_company_id() -> int:
    raw = (request.headers.get(COMPANY_HEADER) or "").strip()
    if not raw.isdigit() or int(raw) <= 0:
        raise AuthenticationError("Missing or invalid company context")
    return int(raw)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def arg_int(name: str) -> Optional[int]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    if not raw.lstrip("-").isdigit():
        raise ValidationError(f"{name} must be an integer")
    return int(raw)


def arg_date(name: str, *, required: bool = False) -> Optional[date]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationError(f"{name} is required")
        return None
    return parse_iso_date(raw)


def arg_int_list(name: str) -> Optional[list[int]]:
    """Accept both ``?ids=1&ids=2`` and ``?ids=1,2``."""
    values: list[int] = []
    for raw in request.args.getlist(name):
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            if not part.isdigit():
                raise ValidationError(f"{name} must be a list of integers")
            values.append(int(part))
    return values or None


def arg_bool(name: str, default: bool = False) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        for error_cls, status in _STATUS_BY_ERROR:
            if isinstance(exc, error_cls):
                return fail(str(exc), status, error=type(exc).__name__)
        return fail(str(exc), 400, error=type(exc).__name__)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return fail(exc.description or exc.name, exc.code or 500, error=exc.name)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500, error=type(exc).__name__)
