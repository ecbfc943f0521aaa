from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.datetime_utils import now_local
from ..common.web import admin_required, int_arg, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/balance", methods=["GET"], endpoint="my_balance")
    @login_required
    def my_balance():
        year = int_arg("year", now_local().year)
        balance = container.balance_service.balance_for(employee_id=int(session["user_id"]), year=year)
        return jsonify(balance.to_dict())

    @app.route("/admin/balance/<int:employee_id>", methods=["GET"], endpoint="employee_balance")
    @admin_required
    def employee_balance(employee_id: int):
        container.profile_service.get(employee_id)
        year = int_arg("year", now_local().year)
        return jsonify(container.balance_service.balance_for(employee_id=employee_id, year=year).to_dict())
