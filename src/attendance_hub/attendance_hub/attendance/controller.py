from __future__ import annotations

import csv
import io
import logging
import uuid
from typing import Any, Mapping

from flask import Flask, jsonify, request, session

from ..branches.service import parse_branch_filter
from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import require_non_empty
from ..common.web import (
    OPERATOR_KEY,
    OPERATOR_NAME,
    OPERATOR_ROLE,
    current_operator,
    current_operator_key,
    json_error,
    operator_required,
)
from ..container import Container
from ..core.constants import DEFAULT_OPERATOR_ROLE
from ..core.enums import GuardianType
from ..core.exceptions import (
    CommitInFlight,
    PersonNotFound,
    ValidationError,
    WriteNetworkFailure,
    WriteRejected,
)
from ..qr.codec import decode_qr_image
from .service import AttendanceBoard

logger = logging.getLogger(__name__)

BOARD_SESSION_KEY = "pending_board"


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _board_from(values: Mapping[str, Any]) -> AttendanceBoard:
        branch_id = parse_branch_filter(values.get("branch_id"))
        date_s = values.get("date")
        try:
            work_date = parse_iso_date(str(date_s)) if date_s else None
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {date_s!r} (expected YYYY-MM-DD)") from exc
        return service.board(branch_id=branch_id, work_date=work_date)

    def _remember_board(board: AttendanceBoard) -> None:
        session[BOARD_SESSION_KEY] = {"branch_id": board.branch_id, "date": format_iso_date(board.work_date)}

    def _pending_response(board: AttendanceBoard, pending, options):
        _remember_board(board)
        return jsonify({
            "success": True,
            "action": pending.action_type.value,
            "method": pending.method.value,
            "prompt": pending.prompt,
            "person": pending.view.to_dict(),
            "guardians": [o.to_dict() for o in options],
        }), 200

    @app.route("/operator", methods=["POST"], endpoint="set_operator")
    def set_operator():
        data = request.get_json(silent=True) or {}
        name = require_non_empty(data.get("name") or "", "name")
        role = (data.get("role") or DEFAULT_OPERATOR_ROLE).strip()

        session[OPERATOR_KEY] = session.get(OPERATOR_KEY) or uuid.uuid4().hex
        session[OPERATOR_NAME] = name
        session[OPERATOR_ROLE] = role
        return jsonify({"success": True, "operator": {"name": name, "role": role}}), 200

    @app.route("/api/attendance/board", methods=["GET"], endpoint="attendance_board")
    def attendance_board():
        board = _board_from(request.args)
        board.refresh()
        views = board.search(request.args.get("q"))
        return jsonify({
            "success": True,
            "date": format_iso_date(board.work_date),
            "branch_id": board.branch_id,
            "summary": board.summary(views).to_dict(),
            "data": [v.to_dict() for v in views],
        }), 200

    @app.route("/api/attendance/board.csv", methods=["GET"], endpoint="attendance_board_csv")
    def attendance_board_csv():
        board = _board_from(request.args)
        board.refresh()

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["external_code", "name", "class_name", "section", "status", "in_time", "in_by", "out_time", "out_by"],
            extrasaction="ignore",
        )
        writer.writeheader()
        for view in board.views():
            writer.writerow(view.to_dict())

        filename = f"attendance_{format_iso_date(board.work_date)}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/select", methods=["POST"], endpoint="attendance_select")
    @operator_required
    def attendance_select():
        data = request.get_json(silent=True) or {}
        person_ref = require_non_empty(str(data.get("person_id") or ""), "person_id")
        board = _board_from(data)
        try:
            pending, options = service.select_person(board, person_ref, operator_key=current_operator_key())
        except PersonNotFound as e:
            return json_error(str(e), 404, searched=e.searched, roster_size=e.roster_size)
        except CommitInFlight as e:
            return json_error(str(e), 409)
        return _pending_response(board, pending, options)

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @operator_required
    def attendance_scan():
        if "image" in request.files:
            values = request.form
            payload = decode_qr_image(request.files["image"].read())
            if not payload:
                return json_error("No QR code detected in the image", 400)
        else:
            values = request.get_json(silent=True) or {}
            payload = require_non_empty(str(values.get("payload") or ""), "payload")

        board = _board_from(values)
        try:
            pending, options = service.scan(board, payload, operator_key=current_operator_key())
        except PersonNotFound as e:
            # The scanner stays open; the client offers Retry.
            return json_error(
                f"No matching person for scanned ID {e.searched}",
                404,
                searched=e.searched,
                roster_size=e.roster_size,
                retry=True,
            )
        except CommitInFlight as e:
            return json_error(str(e), 409)
        return _pending_response(board, pending, options)

    @app.route("/api/attendance/guardian", methods=["POST"], endpoint="attendance_guardian")
    @operator_required
    def attendance_guardian():
        data = request.get_json(silent=True) or {}
        raw_type = require_non_empty(str(data.get("guardian_type") or ""), "guardian_type")
        try:
            guardian_type = GuardianType(raw_type)
        except ValueError:
            return json_error(f"Unknown guardian type: {raw_type}", 400)

        board = _board_from(session.get(BOARD_SESSION_KEY) or {})
        try:
            outcome = service.choose_guardian(
                board,
                guardian_type,
                operator_key=current_operator_key(),
                operator=current_operator(),
            )
        except CommitInFlight as e:
            return json_error(str(e), 409)
        except WriteRejected as e:
            return json_error(e.message, 400, error="write_rejected")
        except WriteNetworkFailure as e:
            return json_error(e.message, 502, error="write_network_failure")
        finally:
            if service.workflow(current_operator_key()).pending is None:
                session.pop(BOARD_SESSION_KEY, None)

        w = outcome.write
        return jsonify({
            "success": True,
            "message": f"{outcome.view.person.display_name} marked {w.action.value} by {w.guardian_name}",
            "write": w.to_payload(),
            "data": outcome.view.to_dict(),
        }), 200

    @app.route("/api/attendance/cancel", methods=["POST"], endpoint="attendance_cancel")
    @operator_required
    def attendance_cancel():
        cancelled = service.cancel(current_operator_key())
        session.pop(BOARD_SESSION_KEY, None)
        return jsonify({"success": True, "cancelled": cancelled}), 200
