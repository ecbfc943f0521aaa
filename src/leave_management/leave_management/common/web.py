"""Shared Flask helpers: session guards, JSON errors, request parsing."""
from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (ValidationError, 400, "validation_error"),
    (NotFoundError, 404, "not_found"),
    (InvalidStateError, 409, "invalid_state"),
    (AuthenticationError, 401, "authentication_error"),
    (AuthorizationError, 403, "authorization_error"),
    (PersistenceError, 503, "persistence_error"),
)


def error_response(kind: str, message: str, status: int):
    return jsonify({"error": kind, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        for cls, status, kind in ERROR_STATUS:
            if isinstance(exc, cls):
                if status >= 500:
                    logger.error("%s %s failed: %s (cause=%r)", request.method, request.path, exc, exc.__cause__)
                return error_response(kind, str(exc), status)
        return error_response("domain_error", str(exc), 400)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("authentication_error", "Veuillez vous connecter pour continuer", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("authentication_error", "Veuillez vous connecter pour continuer", 401)
        if session.get("role") != Role.ADMIN.value:
            return error_response("authorization_error", "Accès réservé aux administrateurs", 403)
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Corps JSON invalide")
    return data


def int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Paramètre {name} invalide")
