from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..branches.service import parse_branch_filter
from ..common.web import json_error
from ..container import Container
from ..qr.codec import encode_person_qr


def register(app: Flask, container: Container) -> None:
    @app.route("/api/people/<person_ref>/qr", methods=["GET"], endpoint="person_qr")
    def person_qr(person_ref: str):
        """ID-card QR for one roster entry (numeric id or roster code)."""
        branch_id = parse_branch_filter(request.args.get("branch_id"))
        roster = container.roster_service.load_roster(branch_id=branch_id)
        person = next((p for p in roster if person_ref in (str(p.id), p.external_code)), None)
        if person is None:
            return json_error(f"No person {person_ref!r} on the roster", 404)

        png = encode_person_qr(person)
        return send_file(
            io.BytesIO(png),
            mimetype="image/png",
            download_name=f"qr_{person.external_code or person.id}.png",
        )
