"""Request authentication for the Flask layer.

Every request outside the public prefixes is resolved to a Principal by the
gate installed here, from the login session or from HTTP Basic credentials.
Views receive it through the `principal` keyword argument.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import Flask, g, redirect, request, session, url_for

from ..common.http import error_response
from ..core.constants import API_PREFIX, PUBLIC_PATH_PREFIXES, WEBSOCKET_ENDPOINT
from ..core.exceptions import AuthenticationError, PrincipalNotFoundError
from ..managers.service import ManagerDetailsService
from .principal import Principal

SESSION_KEY = "principal"

# Endpoints reachable without a principal besides the public path prefixes.
PUBLIC_ENDPOINTS = {"login"}


def is_public_path(path: str) -> bool:
    return any(path == p.rstrip("/") or path.startswith(p) for p in PUBLIC_PATH_PREFIXES)


def resolve_principal(details: ManagerDetailsService) -> Optional[Principal]:
    name = session.get(SESSION_KEY)
    if name:
        try:
            return details.load_principal(name)
        except PrincipalNotFoundError:
            session.pop(SESSION_KEY, None)

    auth = request.authorization
    if auth is not None and auth.type == "basic":
        return details.authenticate(auth.username or "", auth.password or "")
    return None


def _wants_challenge() -> bool:
    return (
        request.path.startswith(API_PREFIX)
        or request.path == WEBSOCKET_ENDPOINT
        or request.authorization is not None
        or request.accept_mimetypes.best == "application/json"
    )


def unauthenticated_response(message: str = "Full authentication is required"):
    if _wants_challenge():
        return error_response(401, "unauthorized", message)
    return redirect(url_for("login"))


def install_request_gate(app: Flask, details: ManagerDetailsService) -> None:
    @app.before_request
    def require_authentication():
        g.principal = None
        if is_public_path(request.path) or request.endpoint in PUBLIC_ENDPOINTS:
            return None
        try:
            g.principal = resolve_principal(details)
        except AuthenticationError as e:
            return error_response(401, "unauthorized", str(e))
        if g.principal is None:
            return unauthenticated_response()
        return None


def principal_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        principal = g.get("principal")
        if principal is None:
            return unauthenticated_response()
        return view(*args, principal=principal, **kwargs)

    return wrapper
