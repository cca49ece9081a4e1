# blueprints/schedule/engine/occurrences.py
from __future__ import annotations
from datetime import date
from typing import Iterable

from .calendar import course_date, semester_week_number
from .entries import CourseEntry


def active_courses(courses: Iterable[CourseEntry], week_number: int) -> list[CourseEntry]:
    """Courses held in semester week ``week_number``, input order kept."""
    return [c for c in courses if week_number in c.weeks]


def group_by_day(courses: Iterable[CourseEntry]) -> dict[int, list[CourseEntry]]:
    """day_of_week -> courses. Days without courses are absent keys, not empty lists."""
    out: dict[int, list[CourseEntry]] = {}
    for c in courses:
        out.setdefault(c.day_of_week, []).append(c)
    return out


def courses_on(courses: Iterable[CourseEntry], d: date, semester_start: date, week_start_day: int) -> list[CourseEntry]:
    week_no = semester_week_number(d, semester_start, week_start_day)
    return [c for c in active_courses(courses, week_no) if c.day_of_week == d.isoweekday()]


def occurrence_dates(course: CourseEntry, semester_start: date, week_start_day: int) -> list[date]:
    return sorted(
        course_date(w, course.day_of_week, semester_start, week_start_day)
        for w in course.weeks
    )
