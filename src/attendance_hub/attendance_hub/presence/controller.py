from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.web import json_error
from ..container import Container
from .status import is_online, presence_label


def register(app: Flask, container: Container) -> None:
    @app.route("/api/presence", methods=["GET"], endpoint="presence_status")
    def presence_status():
        """Chat partner status from their last-seen timestamp."""
        raw = request.args.get("last_seen")
        try:
            last_seen = parse_iso_datetime(raw)
        except ValueError:
            return json_error(f"Invalid last_seen: {raw!r}", 400)

        now = container.clock()
        return jsonify({
            "success": True,
            "online": is_online(last_seen, now),
            "label": presence_label(last_seen, now),
        }), 200
