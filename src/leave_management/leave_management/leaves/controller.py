from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, json_body, login_required
from ..container import Container
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import LeaveFilter


def _parse_status(value) -> LeaveStatus | None:
    v = (value or "").strip().lower()
    if not v or v == "all":
        return None
    try:
        return LeaveStatus(v)
    except ValueError:
        raise ValidationError("Statut invalide")


def register(app: Flask, container: Container) -> None:
    @app.route("/leaves", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        views = container.leave_service.list_for_employee(employee_id=int(session["user_id"]))
        return jsonify([v.to_dict() for v in views])

    @app.route("/leaves", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        data = json_body()
        created = container.leave_service.submit(
            employee_id=int(session["user_id"]),
            leave_type=data.get("type"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            reason=data.get("reason"),
        )
        return jsonify(created.to_dict()), 201

    @app.route("/leaves/<int:request_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(request_id: int):
        view = container.leave_service.get(request_id)
        if session.get("role") != Role.ADMIN.value and view.request.employee_id != int(session["user_id"]):
            raise AuthorizationError("Accès refusé")
        return jsonify(view.to_dict())

    @app.route("/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_leave")
    @login_required
    def cancel_leave(request_id: int):
        cancelled = container.leave_service.cancel(request_id=request_id, actor_id=int(session["user_id"]))
        return jsonify(cancelled.to_dict())

    @app.route("/admin/leaves", methods=["GET"], endpoint="admin_leaves")
    @admin_required
    def admin_leaves():
        flt = LeaveFilter(
            search=request.args.get("search") or None,
            status=_parse_status(request.args.get("status")),
            department=request.args.get("department") or None,
        )
        views = container.leave_service.list_requests(flt)
        return jsonify({"count": len(views), "items": [v.to_dict() for v in views]})

    @app.route("/admin/leaves/stats", methods=["GET"], endpoint="admin_leave_stats")
    @admin_required
    def admin_leave_stats():
        return jsonify(container.leave_service.stats())

    @app.route("/admin/leaves/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @admin_required
    def approve_leave(request_id: int):
        decided = container.leave_service.approve(
            request_id=request_id,
            approver_id=int(session["user_id"]),
            comment=json_body().get("comment"),
        )
        return jsonify(decided.to_dict())

    @app.route("/admin/leaves/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @admin_required
    def reject_leave(request_id: int):
        decided = container.leave_service.reject(
            request_id=request_id,
            approver_id=int(session["user_id"]),
            comment=json_body().get("comment"),
        )
        return jsonify(decided.to_dict())

    @app.route("/admin/leaves/<int:request_id>/comment", methods=["POST"], endpoint="comment_leave")
    @admin_required
    def comment_leave(request_id: int):
        updated = container.leave_service.comment(
            request_id=request_id,
            admin_id=int(session["user_id"]),
            comment=json_body().get("comment"),
        )
        return jsonify(updated.to_dict())
