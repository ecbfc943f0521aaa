from __future__ import annotations

from flask import Flask, Response, session

from ..common.web import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/export/<kind>", methods=["GET"], endpoint="export_csv")
    @login_required
    def export_csv(kind: str):
        actor = container.auth_service.current_user(int(session["user_id"]))
        exported = container.export_service.export(kind, actor=actor)
        return Response(
            exported.content,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={exported.filename}"},
        )
