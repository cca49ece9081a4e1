# blueprints/schedule/engine/week.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

from .calendar import WeekWindow
from .entries import CourseEntry, CourseIssue, validate_entries
from .occurrences import active_courses, group_by_day
from .packing import OverlapLayout, pack_day


@dataclass
class WeekLayout:
    window: WeekWindow
    # day_of_week -> [(course, layout)] in packing order; empty days absent
    days: dict[int, list[tuple[CourseEntry, OverlapLayout]]] = field(default_factory=dict)
    issues: list[CourseIssue] = field(default_factory=list)

    def layout_for(self, course_id) -> OverlapLayout | None:
        for items in self.days.values():
            for c, lay in items:
                if c.id == course_id:
                    return lay
        return None


def build_week(courses: Iterable[CourseEntry], window: WeekWindow) -> WeekLayout:
    """Filter the snapshot to the window's semester week and lay out each day."""
    valid, issues = validate_entries(courses)
    by_day = group_by_day(active_courses(valid, window.semester_week_number))
    days: dict[int, list[tuple[CourseEntry, OverlapLayout]]] = {}
    for dow in sorted(by_day):
        by_id = {c.id: c for c in by_day[dow]}
        packed = pack_day(by_day[dow])
        days[dow] = [(by_id[cid], lay) for cid, lay in packed.items()]
    return WeekLayout(window=window, days=days, issues=issues)
