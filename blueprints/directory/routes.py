from __future__ import annotations
import logging
from typing import Any, Dict, List

from pydantic import ValidationError
from flask import abort, jsonify, request, url_for
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query

from . import bp
from .schemas import (
    CourseIn, CourseOut,
    ScheduleIn, ScheduleOut,
    SettingsIn, SettingsOut,
    TimeSlotIn, TimeSlotOut,
)
from extensions import db
from models import Course, Schedule, TimeSlot
from blueprints.schedule import services as schedule_svc

log = logging.getLogger(__name__)

# ----------------------- Helpers -----------------------
def ok(data: Any, status: int = 200):
    return jsonify(data), status

def created(location: str, data: Any):
    resp = jsonify(data)
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp

def error(msg: str, status: int = 400, code: str | None = None, field: str | None = None):
    payload = {"error": msg}
    if code: payload["code"] = code
    if field: payload["field"] = field
    return jsonify(payload), status

def _page_args(default_per_page: int = 20) -> tuple[int, int]:
    try:
        page = max(1, int(request.args.get("page", 1)))
        per_page = min(100, max(1, int(request.args.get("per_page", default_per_page))))
    except ValueError:
        abort(400, description="page/per_page must be integers")
    return page, per_page

def _paginate(query: Query, serializer, *, page: int, per_page: int, endpoint_fields: List):
    total = query.count()
    rows = query.offset((page - 1) * per_page).limit(per_page).all()
    items = [
        serializer.model_validate(_row_to_dict(r, endpoint_fields)).model_dump(mode="json")
        for r in rows
    ]
    return {"items": items, "meta": {"page": page, "per_page": per_page, "total": total}}

def _row_to_dict(row, fields: List[str]) -> Dict[str, Any]:
    return {f: getattr(row, f) for f in fields}

def _handle_integrity_error(ex: IntegrityError):
    log.info("integrity error: %s", getattr(ex, "orig", ex))
    return error("Unique constraint violation", status=409, code="UNIQUE_CONSTRAINT", field=None)

def _pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors()
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs

@bp.errorhandler(ValidationError)
def _on_validation_error(ve: ValidationError):
    return jsonify({"error": "validation_error", "detail": _pydantic_errors_safe(ve)}), 422

def _commit_or_conflict():
    try:
        db.session.commit()
    except IntegrityError as ex:
        db.session.rollback()
        return _handle_integrity_error(ex)
    return None

SCHEDULE_FIELDS = ["id", "name", "term_name", "created_at", "is_active"]
COURSE_FIELDS = ["id", "schedule_id", "name", "teacher", "location", "day_of_week",
                 "time_slot", "duration", "weeks", "color"]
TIMESLOT_FIELDS = ["id", "order_no", "start_time", "end_time"]

def _schedule_out(s: Schedule) -> dict:
    return ScheduleOut.model_validate(_row_to_dict(s, SCHEDULE_FIELDS)).model_dump(mode="json")

def _course_out(c: Course) -> dict:
    return CourseOut.model_validate(_row_to_dict(c, COURSE_FIELDS)).model_dump(mode="json")

# ----------------------- CRUD JSON API -----------------------
# URL: /directory/api/<resource>[/<id>]

# ---- Schedules ----
@bp.get("/api/schedules")
def api_schedules_list():
    page, per_page = _page_args()
    q = request.args.get("q", "")
    s = db.session.query(Schedule)
    if q:
        s = s.filter(or_(Schedule.name.like(f"%{q}%"), Schedule.term_name.like(f"%{q}%")))
    s = s.order_by(Schedule.created_at.desc(), Schedule.id.desc())
    return ok(_paginate(s, ScheduleOut, page=page, per_page=per_page, endpoint_fields=SCHEDULE_FIELDS))

@bp.post("/api/schedules")
def api_schedules_create():
    parsed = ScheduleIn.model_validate(request.get_json(silent=True) or {})
    sch = Schedule(name=parsed.name.strip(), term_name=parsed.term_name.strip())
    db.session.add(sch)
    db.session.commit()
    return created(url_for("directory.api_schedules_get", id=sch.id), _schedule_out(sch))

@bp.get("/api/schedules/<int:id>")
def api_schedules_get(id: int):
    sch = db.session.get(Schedule, id) or abort(404)
    return ok(_schedule_out(sch))

@bp.put("/api/schedules/<int:id>")
def api_schedules_update(id: int):
    parsed = ScheduleIn.model_validate(request.get_json(silent=True) or {})
    sch = db.session.get(Schedule, id) or abort(404)
    sch.name = parsed.name.strip()
    sch.term_name = parsed.term_name.strip()
    db.session.commit()
    return ok({"ok": True})

@bp.delete("/api/schedules/<int:id>")
def api_schedules_delete(id: int):
    sch = db.session.get(Schedule, id) or abort(404)
    db.session.delete(sch)
    db.session.commit()
    return "", 204

@bp.post("/api/schedules/<int:id>/activate")
def api_schedules_activate(id: int):
    sch = db.session.get(Schedule, id) or abort(404)
    # one transaction: at most one active schedule at any commit
    db.session.query(Schedule).filter(Schedule.id != sch.id, Schedule.is_active.is_(True)) \
        .update({Schedule.is_active: False}, synchronize_session="fetch")
    sch.is_active = True
    db.session.commit()
    log.info("schedule %s activated", sch.id)
    return ok(_schedule_out(sch))

@bp.get("/api/schedules/<int:id>/courses")
def api_schedule_courses(id: int):
    sch = db.session.get(Schedule, id) or abort(404)
    return ok({"schedule": _schedule_out(sch), "items": [_course_out(c) for c in sch.courses]})

# ---- Courses ----
@bp.get("/api/courses")
def api_courses_list():
    page, per_page = _page_args(50)
    s = db.session.query(Course)
    schedule_id = request.args.get("schedule_id", type=int)
    if schedule_id:
        s = s.filter(Course.schedule_id == schedule_id)
    day = request.args.get("day_of_week", type=int)
    if day:
        s = s.filter(Course.day_of_week == day)
    s = s.order_by(Course.day_of_week.asc(), Course.time_slot.asc(), Course.id.asc())
    return ok(_paginate(s, CourseOut, page=page, per_page=per_page, endpoint_fields=COURSE_FIELDS))

def _apply_course(c: Course, parsed: CourseIn) -> None:
    c.schedule_id = parsed.schedule_id
    c.name = parsed.name.strip()
    c.teacher = parsed.teacher
    c.location = parsed.location
    c.day_of_week = parsed.day_of_week
    c.time_slot = parsed.time_slot
    c.duration = parsed.duration
    c.weeks = list(parsed.weeks)
    c.color = parsed.color.upper()

@bp.post("/api/courses")
def api_courses_create():
    parsed = CourseIn.model_validate(request.get_json(silent=True) or {})
    if not db.session.get(Schedule, parsed.schedule_id):
        return error("schedule not found", status=400, code="UNKNOWN_SCHEDULE", field="schedule_id")
    c = Course()
    _apply_course(c, parsed)
    db.session.add(c)
    db.session.commit()
    return created(url_for("directory.api_courses_get", id=c.id), _course_out(c))

@bp.get("/api/courses/<int:id>")
def api_courses_get(id: int):
    c = db.session.get(Course, id) or abort(404)
    return ok(_course_out(c))

@bp.put("/api/courses/<int:id>")
def api_courses_update(id: int):
    parsed = CourseIn.model_validate(request.get_json(silent=True) or {})
    c = db.session.get(Course, id) or abort(404)
    if not db.session.get(Schedule, parsed.schedule_id):
        return error("schedule not found", status=400, code="UNKNOWN_SCHEDULE", field="schedule_id")
    _apply_course(c, parsed)
    db.session.commit()
    return ok(_course_out(c))

@bp.delete("/api/courses/<int:id>")
def api_courses_delete(id: int):
    c = db.session.get(Course, id) or abort(404)
    db.session.delete(c)
    db.session.commit()
    return "", 204

# ---- Time Slots ----
@bp.get("/api/time-slots")
def api_time_slots_list():
    page, per_page = _page_args(50)
    s = db.session.query(TimeSlot).order_by(TimeSlot.order_no.asc())
    return ok(_paginate(s, TimeSlotOut, page=page, per_page=per_page, endpoint_fields=TIMESLOT_FIELDS))

@bp.post("/api/time-slots")
def api_time_slots_create():
    parsed = TimeSlotIn.model_validate(request.get_json(silent=True) or {})
    ts = TimeSlot(order_no=parsed.order_no, start_time=parsed.start_time, end_time=parsed.end_time)
    db.session.add(ts)
    conflict = _commit_or_conflict()
    if conflict:
        return conflict
    out = TimeSlotOut.model_validate(_row_to_dict(ts, TIMESLOT_FIELDS))
    return created(url_for("directory.api_time_slots_get", id=ts.id), out.model_dump(mode="json"))

@bp.get("/api/time-slots/<int:id>")
def api_time_slots_get(id: int):
    ts = db.session.get(TimeSlot, id) or abort(404)
    return ok(TimeSlotOut.model_validate(_row_to_dict(ts, TIMESLOT_FIELDS)).model_dump(mode="json"))

@bp.put("/api/time-slots/<int:id>")
def api_time_slots_update(id: int):
    parsed = TimeSlotIn.model_validate(request.get_json(silent=True) or {})
    ts = db.session.get(TimeSlot, id) or abort(404)
    ts.order_no = parsed.order_no
    ts.start_time = parsed.start_time
    ts.end_time = parsed.end_time
    conflict = _commit_or_conflict()
    if conflict:
        return conflict
    return ok({"ok": True})

@bp.delete("/api/time-slots/<int:id>")
def api_time_slots_delete(id: int):
    ts = db.session.get(TimeSlot, id) or abort(404)
    db.session.delete(ts)
    db.session.commit()
    return "", 204

# ---- Settings ----
def _settings_out(st) -> dict:
    return SettingsOut.model_validate({
        "week_start_day": st.week_start_day,
        "semester_start_date": st.semester_start_date,
        "updated_at": st.updated_at,
    }).model_dump(mode="json")

@bp.get("/api/settings")
def api_settings_get():
    return ok(_settings_out(schedule_svc.settings_row()))

@bp.put("/api/settings")
def api_settings_update():
    parsed = SettingsIn.model_validate(request.get_json(silent=True) or {})
    st = schedule_svc.settings_row()
    st.week_start_day = parsed.week_start_day
    st.semester_start_date = parsed.semester_start_date
    db.session.commit()
    # cached week windows on clients are stale now; they re-fetch on their side
    log.info("settings updated: week_start_day=%s semester_start=%s",
             st.week_start_day, st.semester_start_date.isoformat())
    return ok(_settings_out(st))
