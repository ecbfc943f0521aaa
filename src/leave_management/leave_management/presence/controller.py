from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import admin_required, int_arg
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/presence", methods=["GET"], endpoint="admin_presence")
    @admin_required
    def admin_presence():
        snap = container.presence_service.snapshot(request.args.get("date") or None)
        return jsonify(snap.to_dict())

    @app.route("/admin/presence/calendar", methods=["GET"], endpoint="admin_presence_calendar")
    @admin_required
    def admin_presence_calendar():
        today = now_local().date()
        year = int_arg("year", today.year)
        month = int_arg("month", today.month)
        days = container.presence_service.calendar(year, month)
        return jsonify(
            {
                "year": year,
                "month": month,
                "days": {d.isoformat(): [a.to_dict() for a in absent] for d, absent in days.items()},
            }
        )
