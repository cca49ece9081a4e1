# blueprints/schedule/engine/calendar.py
"""Week arithmetic: dates <-> week offsets <-> semester week numbers.

All functions work on plain ``datetime.date`` values (midnight local time is
implied). A ``datetime`` passed in is truncated to its date.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import IntEnum


class ScheduleConfigError(ValueError):
    """Settings value outside its allowed range (programming error)."""


class WeekStartDay(IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


@dataclass(frozen=True)
class WeekWindow:
    offset: int
    week_start_date: date
    week_dates: tuple[date, ...] = ()
    semester_week_number: int = 0

    @property
    def is_pre_semester(self) -> bool:
        return self.semester_week_number <= 0

    def to_dict(self) -> dict:
        return {
            "offset": self.offset,
            "week_start_date": self.week_start_date.isoformat(),
            "week_dates": [d.isoformat() for d in self.week_dates],
            "semester_week_number": self.semester_week_number,
            "is_pre_semester": self.is_pre_semester,
        }


def check_week_start_day(value) -> int:
    # bool is an int subclass, True would silently mean Monday
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScheduleConfigError(f"week_start_day must be an int 1..7, got {value!r}")
    if not 1 <= value <= 7:
        raise ScheduleConfigError(f"week_start_day must be in 1..7, got {value}")
    return int(value)


def _as_date(d) -> date:
    if isinstance(d, datetime):
        return d.date()
    return d


def week_start(d: date, week_start_day: int) -> date:
    """First day of the 7-day window containing ``d``."""
    wsd = check_week_start_day(week_start_day)
    d = _as_date(d)
    return d - timedelta(days=(d.isoweekday() - wsd + 7) % 7)


def week_dates(d: date, week_start_day: int) -> list[date]:
    start = week_start(d, week_start_day)
    return [start + timedelta(days=i) for i in range(7)]


def weeks_between(a: date, b: date) -> int:
    """Whole weeks from ``a`` to ``b``.

    Meant for two week starts. For other dates a partial week rounds toward
    negative infinity, e.g. 3 days back is -1.
    """
    return (_as_date(b) - _as_date(a)).days // 7


def semester_week_number(d: date, semester_start: date, week_start_day: int) -> int:
    """1-based semester week of ``d``. Dates before the semester give values <= 0."""
    first = week_start(semester_start, week_start_day)
    current = week_start(d, week_start_day)
    return weeks_between(first, current) + 1


def date_for_offset(offset: int, pivot: date, week_start_day: int) -> date:
    return week_start(pivot, week_start_day) + timedelta(days=7 * offset)


def resolve_window(offset: int, pivot: date, semester_start: date, week_start_day: int) -> WeekWindow:
    start = date_for_offset(offset, pivot, week_start_day)
    return WeekWindow(
        offset=offset,
        week_start_date=start,
        week_dates=tuple(start + timedelta(days=i) for i in range(7)),
        semester_week_number=semester_week_number(start, semester_start, week_start_day),
    )


def course_date(week_number: int, day_of_week: int, semester_start: date, week_start_day: int) -> date:
    """Calendar date of weekday ``day_of_week`` (1=Mon..7=Sun) in semester week ``week_number``."""
    wsd = check_week_start_day(week_start_day)
    first = week_start(semester_start, wsd)
    start = first + timedelta(days=7 * (week_number - 1))
    return start + timedelta(days=(day_of_week - wsd + 7) % 7)


def day_index(day_of_week: int, week_start_day: int) -> int:
    """Column of ``day_of_week`` inside a displayed week (0..6)."""
    return (day_of_week - check_week_start_day(week_start_day) + 7) % 7
