from __future__ import annotations

import io
import json
import logging
from datetime import tzinfo

import qrcode
from flask import Flask, Response, jsonify, request, send_file, stream_with_context

from ..common.auth import admin_required, current_person_id, login_required
from ..common.sse import format_comment, format_sse
from ..core.constants import EVENT_ATTENDANCE_UPDATED, STREAM_KEEPALIVE_SECONDS
from ..core.enums import ErrorKind, ScanOutcome
from ..core.exceptions import DomainError, StorageConflictError
from ..container import Container
from ..geofence.model import Coordinate
from .events import isoformat_or_none
from .model import ScanResult

logger = logging.getLogger(__name__)


_USER_MESSAGES = {
    ErrorKind.INVALID_TOKEN: "Invalid QR code. Please scan the hub code again.",
    ErrorKind.OUT_OF_RANGE: "You are too far from the hub location.",
    ErrorKind.INVALID_COORDINATE: "Your location could not be read.",
    ErrorKind.INVALID_INSTANT: "The scan time is not valid.",
    ErrorKind.STORAGE_CONFLICT: "Something went wrong, please try again.",
}


def _scan_message(result: ScanResult, tz: tzinfo) -> str:
    if result.kind == ScanOutcome.CHECKED_IN:
        return f"Checked in successfully at {result.check_in_at.astimezone(tz).strftime('%H:%M')}"
    if result.kind == ScanOutcome.CHECKED_OUT:
        return f"Checked out at {result.check_out_at.astimezone(tz).strftime('%H:%M')}"
    return "You've already checked in and out for today"


def register(app: Flask, container: Container) -> None:
    def _error(exc: DomainError, status: int):
        kind = exc.kind
        message = _USER_MESSAGES.get(kind) or str(exc)
        body = {"success": False, "error": kind.value, "message": message}
        distance = getattr(exc, "distance_m", None)
        if distance is not None:
            body["distanceM"] = round(distance, 1)
        return jsonify(body), status

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @login_required
    def api_attendance_scan():
        """Check in or out depending on today's state, from a decoded hub QR and a location."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        person_id = current_person_id()

        try:
            coordinate = Coordinate.from_mapping(data.get("coordinate") or data.get("location"))
            decoded = data.get("decodedToken", data.get("qrCodeContent", ""))
            result = container.ledger.record_scan(person_id, coordinate, decoded)
        except StorageConflictError as e:
            logger.error("scan for person %s failed after retries: %s", person_id, e)
            return _error(e, 503)
        except DomainError as e:
            return _error(e, 400)
        except Exception:
            logger.exception("unexpected error while recording scan for person %s", person_id)
            return jsonify({"success": False, "error": "InternalError", "message": "Something went wrong"}), 500

        return jsonify(
            {
                "success": True,
                "kind": result.kind.value,
                "day": result.record.day,
                "checkInAt": isoformat_or_none(result.check_in_at),
                "checkOutAt": isoformat_or_none(result.check_out_at),
                "message": _scan_message(result, container.days.tz),
            }
        ), 200

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    @login_required
    def api_attendance_status():
        status = container.ledger.today_status(current_person_id())
        return jsonify(
            {
                "status": status.state.value,
                "day": status.day,
                "checkInAt": isoformat_or_none(status.check_in_at),
                "checkOutAt": isoformat_or_none(status.check_out_at),
            }
        )

    @app.route("/api/attendance/snapshot", methods=["GET"], endpoint="api_attendance_snapshot")
    @login_required
    def api_attendance_snapshot():
        day = request.args.get("day") or request.args.get("date")
        try:
            events = container.ledger.snapshot(day)
        except DomainError as e:
            return _error(e, 400)
        return jsonify([e.to_wire() for e in events])

    @app.route("/api/attendance/stream", methods=["GET"], endpoint="api_attendance_stream")
    @login_required
    def api_attendance_stream():
        keepalive = float(app.config.get("STREAM_KEEPALIVE_SECONDS", STREAM_KEEPALIVE_SECONDS))
        sub = container.broadcaster.subscribe()

        def generate():
            try:
                yield format_comment("connected")
                for event in sub.iter_events(keepalive=keepalive):
                    if event is None:
                        yield format_comment("keepalive")
                        continue
                    yield format_sse(
                        json.dumps(event.to_wire()),
                        event=EVENT_ATTENDANCE_UPDATED,
                        id=str(event.record_id),
                    )
            finally:
                container.broadcaster.unsubscribe(sub)

        return Response(
            stream_with_context(generate()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.route("/api/hub/qr.png", methods=["GET"], endpoint="api_hub_qr")
    @admin_required
    def api_hub_qr():
        """QR image of the hub token, for printing at the hub entrance."""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(container.hub_token)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
