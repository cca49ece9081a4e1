# fixtures/demo_timetable.py
from datetime import date, time

from extensions import db
from models import Course, Schedule, ScheduleSettings, TimeSlot

DEMO_SCHEDULE = {"name": "Demo timetable", "term_name": "2025-2026-1"}

# (name, teacher, location, day_of_week, time_slot, duration, weeks, color)
DEMO_COURSES = [
    ("Data Structures", "Prof. Wang", "CS-506", 1, 2, 2, list(range(1, 17)), "#FF6B6B"),
    ("Linear Algebra", "Ms. Li", "SCI-208", 1, 4, 2, list(range(1, 17)), "#4ECDC4"),
    ("Computer Networks", "Dr. Zhao", "CS-301", 2, 1, 3, list(range(1, 13)), "#45B7D1"),
    # same morning as Computer Networks: rendered side by side
    ("Networks Lab", "Dr. Zhao", "LAB-2", 2, 2, 2, list(range(2, 13, 2)), "#96CEB4"),
    ("College English", "Mr. Chen", "FL-110", 3, 6, 2, list(range(1, 17)), "#FFEAA7"),
    ("Physical Education", "Coach Sun", "Gym", 4, 3, 2, list(range(1, 17)), "#DDA0DD"),
    ("Probability", "Prof. Zhou", "SCI-101", 5, 8, 2, list(range(9, 17)), "#98D8C8"),
]


def get_or_create(model, defaults=None, **filters):
    inst = db.session.query(model).filter_by(**filters).first()
    if inst:
        return inst, False
    data = dict(filters)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    return inst, True


def _hhmm(s: str) -> time:
    h, m = s.split(":")
    return time(int(h), int(m))


def load_time_slots(slots):
    """``slots`` is an iterable of (order_no, "HH:MM", "HH:MM")."""
    for order_no, start, end in slots:
        get_or_create(TimeSlot, order_no=order_no,
                      defaults={"start_time": _hhmm(start), "end_time": _hhmm(end)})


def load_demo_timetable(semester_start: date, week_start_day: int = 1) -> Schedule:
    """Settings row plus one active demo schedule. Safe to run twice; caller commits."""
    if not db.session.query(ScheduleSettings).first():
        db.session.add(ScheduleSettings(week_start_day=week_start_day, semester_start_date=semester_start))

    sch, _ = get_or_create(Schedule, name=DEMO_SCHEDULE["name"],
                           defaults={"term_name": DEMO_SCHEDULE["term_name"]})
    db.session.flush()
    if not sch.courses:
        for name, teacher, location, dow, slot, duration, weeks, color in DEMO_COURSES:
            sch.courses.append(Course(name=name, teacher=teacher, location=location,
                                      day_of_week=dow, time_slot=slot, duration=duration,
                                      weeks=weeks, color=color))
    if not Schedule.query.filter_by(is_active=True).first():
        sch.is_active = True
    return sch
