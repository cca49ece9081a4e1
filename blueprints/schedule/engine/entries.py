# blueprints/schedule/engine/entries.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseEntry:
    """Read-only snapshot of one weekly course occurrence."""
    id: int
    day_of_week: int           # 1=Mon .. 7=Sun
    time_slot: int
    duration: int = 1
    weeks: frozenset[int] = frozenset()
    schedule_id: int | None = None
    payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def end_slot(self) -> int:
        # exclusive end of [time_slot, time_slot + duration)
        return self.time_slot + self.duration


@dataclass
class CourseIssue:
    code: str
    course_id: Any
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"code": self.code, "course_id": self.course_id, "details": self.details}


def _is_int(v) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def entry_issues(c: CourseEntry) -> list[CourseIssue]:
    issues: list[CourseIssue] = []
    if not _is_int(c.day_of_week) or not 1 <= c.day_of_week <= 7:
        issues.append(CourseIssue("INVALID_DAY_OF_WEEK", c.id, {"day_of_week": c.day_of_week}))
    if not _is_int(c.time_slot):
        issues.append(CourseIssue("INVALID_TIME_SLOT", c.id, {"time_slot": c.time_slot}))
    if not _is_int(c.duration) or c.duration < 1:
        issues.append(CourseIssue("INVALID_DURATION", c.id, {"duration": c.duration}))
    weeks = c.weeks or ()
    if not weeks:
        issues.append(CourseIssue("EMPTY_WEEKS", c.id, {}))
    else:
        bad = sorted((w for w in weeks if not _is_int(w) or w < 1), key=str)
        if bad:
            issues.append(CourseIssue("INVALID_WEEKS", c.id, {"weeks": bad}))
    return issues


def validate_entries(courses: Iterable[CourseEntry]) -> tuple[list[CourseEntry], list[CourseIssue]]:
    """Split into well-formed entries and issues; the first entry with a given id wins."""
    valid: list[CourseEntry] = []
    issues: list[CourseIssue] = []
    seen: set = set()
    for c in courses:
        found = entry_issues(c)
        if c.id in seen:
            found.append(CourseIssue("DUPLICATE_ID", c.id, {}))
        if found:
            for i in found:
                log.warning("skipping course %s: %s %s", c.id, i.code, i.details)
            issues.extend(found)
            continue
        seen.add(c.id)
        valid.append(c)
    return valid, issues
