from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.constants import BASIC_REALM
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR = (
    (ValidationError, 400, "bad_request"),
    (AuthenticationError, 401, "unauthorized"),
    (AuthorizationError, 403, "forbidden"),
    (NotFoundError, 404, "not_found"),
    (ConflictError, 409, "conflict"),
)


def error_response(status: int, kind: str, message: str):
    response = jsonify({"error": kind, "message": message})
    response.status_code = status
    if status == 401:
        response.headers["WWW-Authenticate"] = f'Basic realm="{BASIC_REALM}"'
    return response


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, status, kind in _STATUS_BY_ERROR:
            if isinstance(e, exc_type):
                if status in (403, 409):
                    logger.info("%s: %s", kind, e)
                return error_response(status, kind, str(e))
        logger.error("Unmapped domain error: %r", e)
        return error_response(500, "internal_error", "Internal error")
