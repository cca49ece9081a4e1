# blueprints/schedule/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from flask import current_app

from extensions import db
from models import Course, Schedule, ScheduleSettings, TimeSlot
from .engine import (
    CourseEntry, OverlapLayout, ScheduleNavigator,
    build_week, check_week_start_day, courses_on, day_index, entry_issues,
    occurrence_dates, overlap_components, pack_day, semester_week_number, validate_entries,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleContext:
    week_start_day: int
    semester_start: date


# ---------- settings / snapshot ----------
def settings_row() -> ScheduleSettings:
    st = db.session.query(ScheduleSettings).order_by(ScheduleSettings.id).first()
    if st is None:
        st = ScheduleSettings(
            week_start_day=current_app.config.get("DEFAULT_WEEK_START_DAY", 1),
            semester_start_date=current_app.config.get("SEMESTER_START_DATE") or local_now().date(),
        )
        db.session.add(st)
        db.session.commit()
    return st


def load_settings() -> ScheduleContext:
    """Settings boundary: an out-of-range week start raises ScheduleConfigError here."""
    st = settings_row()
    return ScheduleContext(
        week_start_day=check_week_start_day(st.week_start_day),
        semester_start=st.semester_start_date,
    )


def local_now(now: Optional[datetime] = None) -> datetime:
    # single local calendar: read the wall clock once, then work naive
    if now is None:
        now = datetime.now(ZoneInfo(current_app.config.get("TIMEZONE", "UTC")))
    return now.replace(tzinfo=None)


def active_schedule() -> Optional[Schedule]:
    return (Schedule.query.filter(Schedule.is_active.is_(True))
            .order_by(Schedule.id.asc()).first())


def to_entry(c: Course) -> CourseEntry:
    # malformed rows pass through unchanged; the engine skips and reports them
    return CourseEntry(
        id=c.id,
        day_of_week=c.day_of_week,
        time_slot=c.time_slot,
        duration=c.duration,
        weeks=frozenset(c.weeks or ()),
        schedule_id=c.schedule_id,
        payload={"name": c.name, "teacher": c.teacher, "location": c.location, "color": c.color},
    )


def active_course_entries(schedule: Optional[Schedule] = None) -> List[CourseEntry]:
    schedule = schedule if schedule is not None else active_schedule()
    if schedule is None:
        return []
    rows = Course.query.filter_by(schedule_id=schedule.id).order_by(Course.id.asc()).all()
    return [to_entry(c) for c in rows]


# ---------- formatting ----------
def _format_time(t) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def _load_slots() -> Dict[int, TimeSlot]:
    return {s.order_no: s for s in TimeSlot.query.order_by(TimeSlot.order_no).all()}


def _slot_bounds(entry: CourseEntry, slots: Dict[int, TimeSlot]):
    """Clock start/end of a course, None where the period table has no row."""
    first = slots.get(entry.time_slot)
    last = slots.get(entry.end_slot - 1)
    return (first.start_time if first else None), (last.end_time if last else None)


def _course_item(entry: CourseEntry, layout: Optional[OverlapLayout], slots: Dict[int, TimeSlot]) -> dict:
    start, end = _slot_bounds(entry, slots)
    item = {
        "id": entry.id,
        "day_of_week": entry.day_of_week,
        "time_slot": entry.time_slot,
        "duration": entry.duration,
        "weeks": sorted(w for w in entry.weeks if isinstance(w, int)),
        "start": _format_time(start) if start else None,
        "end": _format_time(end) if end else None,
        **entry.payload,
    }
    if layout is not None:
        item["column"] = layout.column
        item["total_columns"] = layout.total_columns
    return item


def _schedule_dict(s: Optional[Schedule]) -> Optional[dict]:
    if s is None:
        return None
    return {"id": s.id, "name": s.name, "term_name": s.term_name}


# ---------- views ----------
def week_view(pivot: Optional[date] = None, offset: int = 0, at: Optional[date] = None,
              step: int = 0, now: Optional[datetime] = None) -> dict:
    """Laid-out week for the navigator state described by the arguments.

    The navigator is rebuilt per call from (pivot, offset), then ``at``
    (select a date) and ``step`` are applied in that order.
    """
    ctx = load_settings()
    today = local_now(now).date()
    nav = ScheduleNavigator(pivot_date=pivot or today, offset=offset, today=lambda: today)
    if at is not None:
        nav.select_date(at, ctx.week_start_day)
    if step:
        nav.step(step)
    window = nav.window(ctx.semester_start, ctx.week_start_day)

    schedule = active_schedule()
    layout = build_week(active_course_entries(schedule), window)
    slots = _load_slots()

    days = []
    for d in window.week_dates:
        dow = d.isoweekday()
        items = layout.days.get(dow, [])
        # side-by-side groups, shown as conflicts
        conflicts = [[c.id for c in comp]
                     for comp in overlap_components(c for c, _ in items) if len(comp) > 1]
        days.append({
            "date": d.isoformat(),
            "day_of_week": dow,
            "column": day_index(dow, ctx.week_start_day),
            "is_today": d == today,
            "courses": [_course_item(c, lay, slots) for c, lay in items],
            "conflicts": conflicts,
        })
    return {
        "schedule": _schedule_dict(schedule),
        "settings": {"week_start_day": ctx.week_start_day,
                     "semester_start_date": ctx.semester_start.isoformat()},
        "navigator": {"pivot": nav.pivot_date.isoformat(), "offset": nav.offset},
        "window": window.to_dict(),
        "days": days,
        "skipped": [i.to_dict() for i in layout.issues],
    }


def day_view(at: date, now: Optional[datetime] = None) -> dict:
    ctx = load_settings()
    schedule = active_schedule()
    todays = courses_on(active_course_entries(schedule), at, ctx.semester_start, ctx.week_start_day)
    valid, issues = validate_entries(todays)
    packed = pack_day(valid)
    by_id = {c.id: c for c in valid}
    slots = _load_slots()
    return {
        "schedule": _schedule_dict(schedule),
        "date": at.isoformat(),
        "day_of_week": at.isoweekday(),
        "semester_week_number": semester_week_number(at, ctx.semester_start, ctx.week_start_day),
        "is_today": at == local_now(now).date(),
        "courses": [_course_item(by_id[cid], lay, slots) for cid, lay in packed.items()],
        "skipped": [i.to_dict() for i in issues],
    }


def next_course(now: Optional[datetime] = None) -> Optional[dict]:
    """Earliest course of the active schedule starting strictly after ``now``."""
    ctx = load_settings()
    now_dt = local_now(now)
    entries, _ = validate_entries(active_course_entries())
    if not entries:
        return None
    slots = _load_slots()
    lookahead = int(current_app.config.get("NEXT_COURSE_LOOKAHEAD_DAYS", 14))

    best = None
    for day_offset in range(lookahead + 1):
        day = now_dt.date() + timedelta(days=day_offset)
        if semester_week_number(day, ctx.semester_start, ctx.week_start_day) < 1:
            continue
        for c in courses_on(entries, day, ctx.semester_start, ctx.week_start_day):
            start, end = _slot_bounds(c, slots)
            if start is None:
                continue  # slot outside the period table: no clock time to compare
            start_dt = datetime.combine(day, start)
            if start_dt <= now_dt:
                continue
            key = (start_dt, c.time_slot, c.id)
            if best is None or key < best[0]:
                best = (key, c, day, start_dt, end)
        if best is not None:
            break  # later days cannot start earlier

    if best is None:
        return None
    _, c, day, start_dt, end = best
    item = _course_item(c, None, slots)
    item.update({
        "date": day.isoformat(),
        "starts_at": start_dt.isoformat(timespec="minutes"),
        "ends_at": datetime.combine(day, end).isoformat(timespec="minutes") if end else None,
        "semester_week_number": semester_week_number(day, ctx.semester_start, ctx.week_start_day),
    })
    return item


def course_occurrences(course_id: int, now: Optional[datetime] = None,
                       upcoming_only: bool = False) -> Optional[dict]:
    """Concrete dates (and start times where known) on which a course takes place."""
    c = db.session.get(Course, course_id)
    if c is None:
        return None
    ctx = load_settings()
    entry = to_entry(c)
    slots = _load_slots()
    issues = entry_issues(entry)
    if issues:
        log.warning("course %s is malformed, no occurrences: %s", course_id, [i.code for i in issues])
        return {"course": _course_item(entry, None, slots), "occurrences": [],
                "issues": [i.to_dict() for i in issues]}
    start, _ = _slot_bounds(entry, slots)
    now_dt = local_now(now)

    items = []
    for d in occurrence_dates(entry, ctx.semester_start, ctx.week_start_day):
        start_dt = datetime.combine(d, start) if start else None
        if upcoming_only:
            if (start_dt or datetime.combine(d, datetime.max.time())) <= now_dt:
                continue
        items.append({
            "date": d.isoformat(),
            "semester_week_number": semester_week_number(d, ctx.semester_start, ctx.week_start_day),
            "starts_at": start_dt.isoformat(timespec="minutes") if start_dt else None,
        })
    log.debug("course %s: %d occurrences", course_id, len(items))
    return {"course": _course_item(entry, None, slots), "occurrences": items, "issues": []}
