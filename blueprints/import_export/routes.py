# blueprints/import_export/routes.py
from __future__ import annotations
from typing import Any, Dict, List, Tuple

from flask import Blueprint, current_app, jsonify, request

from extensions import db
from models import Schedule
from . import services as svc

api_bp = Blueprint("import_export_api", __name__)


def _read_rows() -> Tuple[List[Dict[str, Any]], List[str], int]:
    """Rows from a multipart CSV ``file`` or a JSON body ``{"courses": [...]}``.

    Returns (rows, missing required headers, number of the first data row).
    """
    f = request.files.get("file")
    if f:
        # utf-8-sig so a BOM from spreadsheet exports is dropped
        text = f.read().decode("utf-8-sig", errors="replace")
        rows, missing = svc.rows_from_csv(text)
        return rows, missing, 2  # row 1 is the header
    body = request.get_json(silent=True) or {}
    rows = body.get("courses") if isinstance(body, dict) else None
    if not isinstance(rows, list):
        return [], ["courses"], 1
    return [r if isinstance(r, dict) else {} for r in rows], [], 1


@api_bp.post("/import/courses")
def import_courses():
    schedule_id = request.args.get("schedule_id", type=int)
    mode = (request.args.get("mode") or "validate").lower()
    replace = (request.args.get("replace") or "").lower() in ("1", "true", "yes")
    if mode not in ("validate", "commit"):
        return jsonify({"error": "mode must be validate|commit", "code": "BAD_REQUEST"}), 400
    if not schedule_id or not db.session.get(Schedule, schedule_id):
        return jsonify({"error": "schedule not found", "code": "UNKNOWN_SCHEDULE"}), 404

    rows, missing, first_row = _read_rows()
    if missing:
        return jsonify({"ok": False, "error": "missing columns", "code": "MISSING_COLUMNS",
                        "missing": missing}), 400
    if len(rows) > current_app.config.get("IMPORT_MAX_ROWS", 2000):
        return jsonify({"ok": False, "error": "too many rows", "code": "TOO_MANY_ROWS"}), 400

    report = svc.validate_course_rows(rows, schedule_id, first_row=first_row)
    out = report.to_dict()
    if mode == "validate":
        return jsonify(out), (200 if report.ok else 400)
    if not report.ok:
        # all-or-nothing: a malformed row never lands in the schedule
        return jsonify(out), 400
    out["created"] = svc.commit_courses(schedule_id, report.accepted, replace=replace)
    return jsonify(out), 201
