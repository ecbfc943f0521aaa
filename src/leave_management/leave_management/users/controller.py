from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.validators import parse_int
from ..common.web import admin_required, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from .service import SessionUser


def _session_payload(user: SessionUser) -> dict:
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "department": user.department,
        "position": user.position,
    }


def register(app: Flask, container: Container) -> None:
    def _start_session(user: SessionUser, *, remember: bool = False) -> None:
        session.clear()
        session.permanent = bool(remember)
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["role"] = user.role.value

    def _current() -> SessionUser:
        return container.auth_service.current_user(int(session["user_id"]))

    @app.route("/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        data = json_body()
        # Self-service sign-up always creates employees; admins are provisioned.
        user = container.auth_service.sign_up(
            email=data.get("email", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            department=data.get("department", ""),
            position=data.get("position", ""),
        )
        _start_session(user)
        return jsonify(_session_payload(user)), 201

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        _start_session(user, remember=bool(data.get("remember_me")))
        return jsonify(_session_payload(user))

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(_session_payload(_current()))

    @app.route("/profile", methods=["GET"], endpoint="profile")
    @login_required
    def profile():
        return jsonify(container.profile_service.get(int(session["user_id"])).public_dict())

    @app.route("/profile", methods=["PATCH"], endpoint="update_profile")
    @login_required
    def update_profile():
        data = json_body()
        updated = container.profile_service.update_profile(
            actor=_current(),
            profile_id=parse_int(data.get("id") or session["user_id"], "Identifiant"),
            name=data.get("name"),
            department=data.get("department"),
            position=data.get("position"),
        )
        if updated.profile_id == int(session["user_id"]):
            session["name"] = updated.name
        return jsonify(updated.public_dict())

    @app.route("/profile/avatar", methods=["PUT"], endpoint="update_avatar")
    @login_required
    def update_avatar():
        data = json_body()
        updated = container.profile_service.set_avatar(
            actor=_current(),
            profile_id=int(session["user_id"]),
            avatar_url=data.get("avatar_url"),
        )
        return jsonify(updated.public_dict())

    @app.route("/admin/employees", methods=["GET"], endpoint="admin_employees")
    @admin_required
    def admin_employees():
        return jsonify([p.public_dict() for p in container.profile_service.list_employees()])
