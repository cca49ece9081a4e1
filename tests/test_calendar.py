from __future__ import annotations
from datetime import date, datetime, timedelta
import pytest

from blueprints.schedule.engine import (
    ScheduleConfigError, ScheduleNavigator, WeekStartDay,
    check_week_start_day, course_date, date_for_offset, day_index,
    resolve_window, semester_week_number, week_dates, week_start, weeks_between,
)

SEMESTER = date(2025, 9, 1)  # a Monday


def test_two_weeks_after_start_is_week_three():
    assert semester_week_number(SEMESTER + timedelta(days=14), SEMESTER, 1) == 3
    # day 0..6 -> week 1, day 7..13 -> week 2
    assert semester_week_number(SEMESTER + timedelta(days=6), SEMESTER, 1) == 1
    assert semester_week_number(SEMESTER + timedelta(days=7), SEMESTER, 1) == 2
    assert semester_week_number(SEMESTER + timedelta(days=20), SEMESTER, 1) == 3


def test_dates_before_semester_are_not_clamped():
    assert semester_week_number(date(2025, 8, 31), SEMESTER, 1) == 0
    assert semester_week_number(date(2025, 8, 20), SEMESTER, 1) == -1


def test_week_number_is_monotone_and_steps_by_one():
    prev = semester_week_number(date(2025, 8, 1), SEMESTER, 3)
    d = date(2025, 8, 2)
    while d < date(2026, 2, 1):
        cur = semester_week_number(d, SEMESTER, 3)
        assert cur - prev in (0, 1)
        # a new week begins exactly on the configured weekday
        assert (cur - prev == 1) == (d.isoweekday() == 3)
        prev, d = cur, d + timedelta(days=1)


@pytest.mark.parametrize("wsd, expected", [
    (1, date(2025, 9, 1)),   # Monday
    (3, date(2025, 9, 3)),   # Wednesday itself
    (4, date(2025, 8, 28)),  # previous Thursday
    (7, date(2025, 8, 31)),  # previous Sunday
])
def test_week_start_for_each_start_day(wsd, expected):
    assert week_start(date(2025, 9, 3), wsd) == expected
    days = week_dates(date(2025, 9, 3), wsd)
    assert days[0] == expected and len(days) == 7
    assert date(2025, 9, 3) in days


def test_datetime_is_truncated_to_its_date():
    assert week_start(datetime(2025, 9, 7, 23, 59), 1) == date(2025, 9, 1)
    assert semester_week_number(datetime(2025, 9, 8, 0, 1), SEMESTER, 1) == 2


def test_offset_round_trip_through_navigator():
    pivot = date(2025, 10, 15)
    for offset in range(-10, 11):
        window = resolve_window(offset, pivot, SEMESTER, 7)
        nav = ScheduleNavigator(pivot_date=pivot)
        nav.select_date(window.week_start_date, 7)
        assert nav.offset == offset
        assert window.week_start_date == date_for_offset(offset, pivot, 7)


def test_window_fields():
    w = resolve_window(1, date(2025, 9, 3), SEMESTER, 1)
    assert w.week_start_date == date(2025, 9, 8)
    assert w.week_dates[-1] == date(2025, 9, 14)
    assert w.semester_week_number == 2
    assert w.is_pre_semester is False
    d = w.to_dict()
    assert d["week_start_date"] == "2025-09-08"
    assert len(d["week_dates"]) == 7
    assert isinstance(w.week_dates, tuple)

    early = resolve_window(-1, date(2025, 9, 3), SEMESTER, 1)
    assert early.semester_week_number == 0 and early.is_pre_semester


def test_course_date():
    assert course_date(1, 1, SEMESTER, 1) == date(2025, 9, 1)
    assert course_date(3, 3, SEMESTER, 1) == date(2025, 9, 17)
    assert course_date(1, 7, SEMESTER, 1) == date(2025, 9, 7)
    # Sunday start: week 1 opens on 2025-08-31
    assert course_date(1, 7, SEMESTER, 7) == date(2025, 8, 31)
    assert course_date(1, 3, SEMESTER, 7) == date(2025, 9, 3)


def test_course_date_lands_in_its_week():
    for wsd in range(1, 8):
        for dow in range(1, 8):
            d = course_date(5, dow, SEMESTER, wsd)
            assert d.isoweekday() == dow
            assert semester_week_number(d, SEMESTER, wsd) == 5


def test_day_index():
    assert day_index(1, 1) == 0
    assert day_index(7, 1) == 6
    assert day_index(7, 7) == 0
    assert day_index(1, 7) == 1


@pytest.mark.parametrize("bad", [0, 8, -1, True, "1", 1.0, None])
def test_bad_week_start_day_raises(bad):
    with pytest.raises(ScheduleConfigError):
        check_week_start_day(bad)
    with pytest.raises(ValueError):
        week_start(date(2025, 9, 1), bad)


def test_week_start_day_enum_is_accepted():
    assert check_week_start_day(WeekStartDay.SUNDAY) == 7
    assert week_start(date(2025, 9, 3), WeekStartDay.MONDAY) == date(2025, 9, 1)


def test_weeks_between_rounds_partial_weeks_down():
    assert weeks_between(date(2025, 9, 1), date(2025, 9, 15)) == 2
    assert weeks_between(date(2025, 9, 1), date(2025, 9, 10)) == 1
    assert weeks_between(date(2025, 9, 3), date(2025, 8, 31)) == -1
    assert weeks_between(date(2025, 9, 15), date(2025, 9, 1)) == -2
