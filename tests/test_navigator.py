from __future__ import annotations
from datetime import date

from blueprints.schedule.engine import ScheduleNavigator

SEMESTER = date(2025, 9, 1)


class FakeClock:
    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


def test_starts_on_current_week():
    clock = FakeClock(date(2025, 9, 17))
    nav = ScheduleNavigator(today=clock)
    assert nav.state() == (0, date(2025, 9, 17))
    w = nav.window(SEMESTER, 1)
    assert w.week_start_date == date(2025, 9, 15)
    assert w.semester_week_number == 3


def test_step_and_jump_to_today():
    clock = FakeClock(date(2025, 9, 17))
    nav = ScheduleNavigator(today=clock)
    nav.step(1)
    nav.step(1)
    nav.step(-3)
    assert nav.offset == -1
    assert nav.window(SEMESTER, 1).semester_week_number == 2

    clock.today = date(2025, 10, 1)
    nav.jump_to_today()
    assert nav.state() == (0, date(2025, 10, 1))
    assert nav.window(SEMESTER, 1).semester_week_number == 5


def test_select_date_moves_offset_not_pivot():
    nav = ScheduleNavigator(pivot_date=date(2025, 9, 17))
    nav.select_date(date(2025, 10, 6), 1)
    assert nav.state() == (3, date(2025, 9, 17))
    nav.select_date(date(2025, 9, 1), 1)
    assert nav.offset == -2
    # same week as the pivot
    nav.select_date(date(2025, 9, 21), 1)
    assert nav.offset == 0


def test_settings_change_keeps_offset():
    nav = ScheduleNavigator(pivot_date=date(2025, 9, 17), offset=2)
    monday = nav.window(SEMESTER, 1)
    sunday = nav.window(SEMESTER, 7)
    assert nav.offset == 2
    assert monday.week_start_date == date(2025, 9, 29)
    assert sunday.week_start_date == date(2025, 9, 28)
    later = nav.window(date(2025, 9, 15), 1)
    assert later.semester_week_number == monday.semester_week_number - 2


def test_repr():
    nav = ScheduleNavigator(pivot_date=date(2025, 9, 17), offset=-1)
    assert repr(nav) == "<ScheduleNavigator pivot=2025-09-17 offset=-1>"
