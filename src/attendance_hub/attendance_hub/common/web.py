from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional, Tuple

from flask import Flask, jsonify, session
from werkzeug.exceptions import HTTPException

from ..attendance.model import Operator
from ..core.exceptions import AuthorizationError, DomainError, ValidationError

logger = logging.getLogger(__name__)

OPERATOR_KEY = "operator_key"
OPERATOR_NAME = "operator_name"
OPERATOR_ROLE = "operator_role"


def json_error(message: str, status: int, **extra: Any) -> Tuple[Any, int]:
    return jsonify({"success": False, "message": message, **extra}), status


def operator_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if OPERATOR_KEY not in session:
            return json_error("Please identify the operator first", 401)
        return view(*args, **kwargs)

    return wrapper


def current_operator() -> Operator:
    if OPERATOR_KEY not in session:
        raise AuthorizationError("No operator in session")
    return Operator(name=session[OPERATOR_NAME], role=session[OPERATOR_ROLE])


def current_operator_key() -> Optional[str]:
    return session.get(OPERATOR_KEY)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return json_error(str(e), 400)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return json_error(str(e), 401)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return json_error(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        # Do not leak internals; the screen keeps rendering.
        logger.exception("Unhandled error")
        return json_error("Internal error", 500)
