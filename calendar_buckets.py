import calendar
from datetime import date, timedelta
from typing import Iterable, List

from config import WEEK_STARTS_ON
from schemas import Task, CalendarCell


def start_of_week(day: date) -> date:
    # weeks run Sunday..Saturday
    return day - timedelta(days=(day.weekday() - WEEK_STARTS_ON) % 7)


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)


def tasks_on(day: date, tasks: Iterable[Task]) -> List[Task]:
    return [task for task in tasks if task.due_date == day]


def month_grid(year: int, month: int, tasks: Iterable[Task], today: date) -> List[CalendarCell]:
    """
    One cell per day from the Sunday on/before the 1st through the Saturday
    on/after the last day of the month. Each cell holds every task due that
    day; truncating long lists is left to the caller.
    """
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    start, end = start_of_week(first), end_of_week(last)

    by_day = {}
    for task in tasks:
        if task.due_date is not None and start <= task.due_date <= end:
            by_day.setdefault(task.due_date, []).append(task)

    cells = []
    day = start
    while day <= end:
        cells.append(CalendarCell(
            day=day,
            in_month=day.month == month,
            is_today=day == today,
            tasks=by_day.get(day, []),
        ))
        day += timedelta(days=1)
    return cells


def week_slice(anchor: date, tasks: Iterable[Task]) -> List[Task]:
    start, end = start_of_week(anchor), end_of_week(anchor)
    return [
        task for task in tasks
        if task.due_date is not None and start <= task.due_date <= end
    ]
