from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/branches", methods=["GET"], endpoint="branch_options")
    def branch_options():
        return jsonify({"success": True, "data": container.branch_service.list_branch_options()}), 200
