# blueprints/schedule/engine/packing.py
"""Column packing of one day's courses.

Each course occupies the half-open slot interval [time_slot, time_slot + duration).
Courses are swept in (time_slot, id) order; every course takes the smallest
column not held by a still-open course. Sorting by start makes this greedy
assignment optimal for interval graphs, so a connected overlap component uses
exactly as many columns as its peak concurrency, which becomes ``total_columns``
for all of its members.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from .entries import CourseEntry, validate_entries


@dataclass(frozen=True)
class OverlapLayout:
    course_id: Any
    column: int
    total_columns: int

    def to_dict(self) -> dict:
        return {"course_id": self.course_id, "column": self.column, "total_columns": self.total_columns}


def _order_key(c: CourseEntry):
    # str ids sort after numeric ones instead of raising TypeError
    return (c.time_slot, isinstance(c.id, str), c.id)


def overlaps(a: CourseEntry, b: CourseEntry) -> bool:
    return a.time_slot < b.end_slot and b.time_slot < a.end_slot


def _sweep(ordered: list[CourseEntry]) -> Iterator[tuple[list[tuple[CourseEntry, int]], int]]:
    """Yield (members with their column, peak concurrency) per connected component."""
    open_: list[tuple[int, int]] = []      # (end_slot, column)
    members: list[tuple[CourseEntry, int]] = []
    peak = 0
    for c in ordered:
        open_ = [o for o in open_ if o[0] > c.time_slot]
        if not open_ and members:
            yield members, peak
            members, peak = [], 0
        used = {col for _, col in open_}
        col = 0
        while col in used:
            col += 1
        open_.append((c.end_slot, col))
        members.append((c, col))
        peak = max(peak, len(open_))
    if members:
        yield members, peak


def pack_day(courses: Iterable[CourseEntry]) -> dict[Any, OverlapLayout]:
    """Layout per course id, in (time_slot, id) order.

    Malformed entries are dropped (and logged) before the sweep so they
    cannot shift the columns of valid courses.
    """
    valid, _ = validate_entries(courses)
    result: dict[Any, OverlapLayout] = {}
    for members, peak in _sweep(sorted(valid, key=_order_key)):
        for c, col in members:
            result[c.id] = OverlapLayout(course_id=c.id, column=col, total_columns=peak)
    return result


def overlap_components(courses: Iterable[CourseEntry]) -> list[list[CourseEntry]]:
    valid, _ = validate_entries(courses)
    return [[c for c, _ in members] for members, _ in _sweep(sorted(valid, key=_order_key))]
