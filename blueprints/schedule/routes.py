# blueprints/schedule/routes.py
from __future__ import annotations
from datetime import date
from flask import Blueprint, request, jsonify
from blueprints.schedule import services as svc

api_bp = Blueprint("schedule_api", __name__)


class BadQuery(ValueError):
    pass


def _date_arg(name: str) -> date | None:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise BadQuery(f"Bad {name}: expected YYYY-MM-DD")


def _int_arg(name: str, default: int = 0) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise BadQuery(f"Bad {name}: expected integer")


@api_bp.errorhandler(BadQuery)
def _bad_query(ex: BadQuery):
    return jsonify({"error": str(ex), "code": "BAD_REQUEST"}), 400


# ---------- API ----------
@api_bp.get("/schedule/week")
def api_schedule_week():
    try:
        data = svc.week_view(
            pivot=_date_arg("pivot"),
            offset=_int_arg("offset"),
            at=_date_arg("date"),
            step=_int_arg("step"),
        )
    except OverflowError:
        # week lands before year 1 or after year 9999
        raise BadQuery("offset out of date range")
    return jsonify(data)


@api_bp.get("/schedule/day")
def api_schedule_day():
    at = _date_arg("date") or svc.local_now().date()
    return jsonify(svc.day_view(at))


@api_bp.get("/schedule/next")
def api_schedule_next():
    data = svc.next_course()
    if not data:
        return jsonify({"error": "not_found"}), 404
    return jsonify(data)


@api_bp.get("/schedule/courses/<int:course_id>/occurrences")
def api_course_occurrences(course_id: int):
    upcoming = (request.args.get("upcoming") or "").lower() in ("1", "true", "yes")
    data = svc.course_occurrences(course_id, upcoming_only=upcoming)
    if data is None:
        return jsonify({"error": "not_found"}), 404
    return jsonify(data)
