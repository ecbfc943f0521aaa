from __future__ import annotations

import json

from flask import Flask, Response, jsonify, session, stream_with_context

from ..common.web import login_required
from ..container import Container
from ..core.constants import DEFAULT_STREAM_KEEPALIVE_SECONDS


def register(app: Flask, container: Container) -> None:
    def _payload(user_id: int) -> dict:
        items = container.notification_service.list(user_id=user_id)
        return {
            "items": [n.to_dict() for n in items],
            "unread_count": sum(1 for n in items if not n.read),
        }

    @app.route("/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    def notifications():
        return jsonify(_payload(int(session["user_id"])))

    @app.route("/notifications/<int:notification_id>/read", methods=["POST"], endpoint="mark_notification_read")
    @login_required
    def mark_notification_read(notification_id: int):
        container.notification_service.mark_read(actor_id=int(session["user_id"]), notification_id=notification_id)
        return jsonify({"ok": True})

    @app.route("/notifications/read-all", methods=["POST"], endpoint="mark_all_notifications_read")
    @login_required
    def mark_all_notifications_read():
        changed = container.notification_service.mark_all_read(user_id=int(session["user_id"]))
        return jsonify({"ok": True, "updated": changed})

    @app.route("/notifications/<int:notification_id>", methods=["DELETE"], endpoint="delete_notification")
    @login_required
    def delete_notification(notification_id: int):
        container.notification_service.delete(actor_id=int(session["user_id"]), notification_id=notification_id)
        return jsonify({"ok": True})

    @app.route("/notifications/stream", methods=["GET"], endpoint="notifications_stream")
    @login_required
    def notifications_stream():
        user_id = int(session["user_id"])

        def generate():
            # The subscription is released when the client disconnects (GeneratorExit).
            with container.feed.subscribe("notifications", user_id=user_id) as sub:
                yield f"event: notifications\ndata: {json.dumps(_payload(user_id))}\n\n"
                for event in sub.events(timeout=DEFAULT_STREAM_KEEPALIVE_SECONDS):
                    if event is None:
                        yield ": keepalive\n\n"
                        continue
                    yield f"event: notifications\ndata: {json.dumps(_payload(user_id))}\n\n"

        return Response(
            stream_with_context(generate()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )
