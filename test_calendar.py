from datetime import date

import pytest

from calendar_buckets import month_grid, week_slice, start_of_week, end_of_week, tasks_on
from schemas import Task


@pytest.mark.parametrize("year,month", [(2024, 2), (2024, 9), (2026, 2), (2023, 12), (2015, 2)])
def test_month_grid_is_whole_sunday_weeks(year, month):
    cells = month_grid(year, month, [], date(2024, 1, 1))
    assert len(cells) % 7 == 0
    # Python: Monday == 0, Sunday == 6
    assert cells[0].day.weekday() == 6
    assert cells[-1].day.weekday() == 5
    assert any(c.day == date(year, month, 1) for c in cells)


def test_month_grid_flags_and_buckets():
    tasks = [
        Task(id=1, due_date=date(2024, 9, 3)),
        Task(id=2, due_date=date(2024, 9, 3)),
        Task(id=3, due_date=date(2024, 9, 3)),
        Task(id=4, due_date=date(2024, 10, 2)),
        Task(id=5),
    ]
    cells = month_grid(2024, 9, tasks, today=date(2024, 9, 3))
    by_day = {c.day: c for c in cells}

    # September 2024 starts on a Sunday and ends on a Monday
    assert cells[0].day == date(2024, 9, 1)
    assert cells[-1].day == date(2024, 10, 5)
    assert by_day[date(2024, 9, 3)].is_today
    assert [t.id for t in by_day[date(2024, 9, 3)].tasks] == [1, 2, 3]
    assert not by_day[date(2024, 10, 2)].in_month
    assert [t.id for t in by_day[date(2024, 10, 2)].tasks] == [4]
    assert sum(len(c.tasks) for c in cells) == 4


def test_week_bounds_are_sunday_to_saturday():
    wednesday = date(2024, 1, 10)
    assert start_of_week(wednesday) == date(2024, 1, 7)
    assert end_of_week(wednesday) == date(2024, 1, 13)
    assert start_of_week(date(2024, 1, 7)) == date(2024, 1, 7)


def test_week_slice_inclusive_and_skips_undated():
    tasks = [
        Task(id=1, due_date=date(2024, 1, 7)),
        Task(id=2, due_date=date(2024, 1, 13)),
        Task(id=3, due_date=date(2024, 1, 14)),
        Task(id=4),
    ]
    assert [t.id for t in week_slice(date(2024, 1, 10), tasks)] == [1, 2]


def test_tasks_on_day():
    tasks = [Task(id=1, due_date=date(2024, 1, 7)), Task(id=2)]
    assert [t.id for t in tasks_on(date(2024, 1, 7), tasks)] == [1]
