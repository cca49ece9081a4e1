# blueprints/schedule/engine/navigator.py
from __future__ import annotations
from datetime import date
from typing import Callable

from .calendar import WeekWindow, resolve_window, week_start, weeks_between


class ScheduleNavigator:
    """Which week is displayed: an offset in weeks from the pivot date's week.

    Single owner only; there is no locking. A settings change (week start day,
    semester start) leaves offset/pivot untouched, callers just ask for a fresh
    ``window()``.
    """

    def __init__(self, pivot_date: date | None = None, offset: int = 0,
                 today: Callable[[], date] = date.today):
        self._today = today
        self.pivot_date: date = pivot_date or today()
        self.offset: int = int(offset)

    def __repr__(self):
        return f"<ScheduleNavigator pivot={self.pivot_date.isoformat()} offset={self.offset}>"

    def state(self) -> tuple[int, date]:
        return self.offset, self.pivot_date

    def jump_to_today(self) -> None:
        self.pivot_date = self._today()
        self.offset = 0

    def select_date(self, d: date, week_start_day: int) -> None:
        self.offset = weeks_between(week_start(self.pivot_date, week_start_day),
                                    week_start(d, week_start_day))

    def step(self, delta: int) -> None:
        self.offset += int(delta)

    def window(self, semester_start: date, week_start_day: int) -> WeekWindow:
        return resolve_window(self.offset, self.pivot_date, semester_start, week_start_day)
