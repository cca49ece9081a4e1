# blueprints/schedule/engine/__init__.py
"""Schedule layout engine: pure functions plus the navigator state object.

No Flask or database imports here; callers hand in ``CourseEntry`` snapshots
and re-derive results whenever courses or settings change.
"""
from .calendar import (
    ScheduleConfigError, WeekStartDay, WeekWindow,
    check_week_start_day, course_date, date_for_offset, day_index,
    resolve_window, semester_week_number, week_dates, week_start, weeks_between,
)
from .entries import CourseEntry, CourseIssue, entry_issues, validate_entries
from .navigator import ScheduleNavigator
from .occurrences import active_courses, courses_on, group_by_day, occurrence_dates
from .packing import OverlapLayout, overlap_components, overlaps, pack_day
from .week import WeekLayout, build_week

__all__ = [
    "ScheduleConfigError", "WeekStartDay", "WeekWindow",
    "check_week_start_day", "course_date", "date_for_offset", "day_index",
    "resolve_window", "semester_week_number", "week_dates", "week_start", "weeks_between",
    "CourseEntry", "CourseIssue", "entry_issues", "validate_entries",
    "ScheduleNavigator",
    "active_courses", "courses_on", "group_by_day", "occurrence_dates",
    "OverlapLayout", "overlap_components", "overlaps", "pack_day",
    "WeekLayout", "build_week",
]
