"""
Derived metrics over an already loaded task collection.

Everything here is a pure function of its arguments. ``now`` and reference
dates are passed in by the caller; only aggregate() falls back to today when
neither it nor the scope carries one.
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from schemas import (
    Task, Project, TimeEntry, TaskStatus, TaskPriority,
    Metrics, MetricsScope, ProjectProgress, ProductivityPoint,
)

TIME_RANGES = {
    "7days": 7,
    "30days": 30,
    "90days": 90,
}


def _is_completed(task: Task) -> bool:
    return task.status == TaskStatus.COMPLETED


def status_counts(tasks: Iterable[Task]) -> Dict[str, int]:
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status.value] += 1
    return counts


def priority_counts(tasks: Iterable[Task]) -> Dict[str, int]:
    counts = {priority.value: 0 for priority in TaskPriority}
    for task in tasks:
        counts[task.priority.value] += 1
    return counts


def completion_rate(tasks: Iterable[Task]) -> float:
    tasks = list(tasks)
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if _is_completed(task))
    return completed / len(tasks) * 100


def _day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def overdue_tasks(tasks: Iterable[Task], now) -> List[Task]:
    today = _day(now)
    return [
        task for task in tasks
        if task.due_date is not None and task.due_date < today and not _is_completed(task)
    ]


def overdue_count(tasks: Iterable[Task], now) -> int:
    return len(overdue_tasks(tasks, now))


def total_tracked_time(tasks: Iterable[Task]) -> float:
    return sum(task.actual_time or 0 for task in tasks)


def average_time_per_completed_task(tasks: Iterable[Task]) -> float:
    completed = [task for task in tasks if _is_completed(task)]
    if not completed:
        return 0
    return total_tracked_time(completed) / len(completed)


def project_progress(project: Project, all_tasks: Iterable[Task]) -> ProjectProgress:
    project_tasks = [task for task in all_tasks if task.project_id == project.id]
    completed = sum(1 for task in project_tasks if _is_completed(task))
    return ProjectProgress(
        project_id=project.id,
        name=project.name,
        task_count=len(project_tasks),
        completed_count=completed,
        progress=completion_rate(project_tasks),
    )


def top_projects(projects: Iterable[Project], all_tasks: Sequence[Task],
                 limit: Optional[int] = None) -> List[ProjectProgress]:
    # sorted() is stable, equal progress keeps project order
    ranked = sorted(
        (project_progress(project, all_tasks) for project in projects),
        key=lambda p: p.progress,
        reverse=True,
    )
    return ranked[:limit] if limit is not None else ranked


class ProductivitySeries:
    """
    Completed/created counts for each of the last ``days`` calendar days
    ending at ``reference_date``, oldest first. Computed lazily and can be
    iterated any number of times.
    """

    def __init__(self, tasks: Sequence[Task], days: int, reference_date):
        self.tasks = tasks
        self.days = max(int(days), 0)
        self.reference_date = _day(reference_date)

    def __len__(self):
        return self.days

    def __iter__(self) -> Iterator[ProductivityPoint]:
        start = self.reference_date - timedelta(days=self.days - 1)
        for offset in range(self.days):
            day = start + timedelta(days=offset)
            yield ProductivityPoint(
                day=day,
                completed_count=sum(1 for t in self.tasks if t.completed_at == day),
                created_count=sum(1 for t in self.tasks if t.created_at == day),
            )


def productivity_series(tasks: Sequence[Task], days: int, reference_date) -> ProductivitySeries:
    return ProductivitySeries(tasks, days, reference_date)


def time_range_days(range_key: str) -> int:
    return TIME_RANGES.get(range_key, TIME_RANGES["7days"])


def tasks_in_scope(tasks: Iterable[Task], scope: Optional[MetricsScope] = None) -> List[Task]:
    """Restrict to a project, a single due day, or an inclusive due-date range."""
    scope = scope or MetricsScope()
    selected = []
    for task in tasks:
        if scope.project_id is not None and task.project_id != scope.project_id:
            continue
        if scope.day is not None and task.due_date != scope.day:
            continue
        if scope.start is not None or scope.end is not None:
            if task.due_date is None:
                continue
            if scope.start is not None and task.due_date < scope.start:
                continue
            if scope.end is not None and task.due_date > scope.end:
                continue
        selected.append(task)
    return selected


def aggregate(tasks: Iterable[Task], scope: Optional[MetricsScope] = None,
              now: Optional[date] = None) -> Metrics:
    scope = scope or MetricsScope()
    today = _day(now or scope.now or date.today())
    scoped = tasks_in_scope(tasks, scope)
    return Metrics(
        total=len(scoped),
        status_counts=status_counts(scoped),
        priority_counts=priority_counts(scoped),
        completed_count=sum(1 for task in scoped if _is_completed(task)),
        completion_rate=completion_rate(scoped),
        overdue_count=overdue_count(scoped, today),
        total_tracked_time=total_tracked_time(scoped),
        average_time_per_completed_task=average_time_per_completed_task(scoped),
    )


def recent_tasks(tasks: Iterable[Task], limit: int = 5) -> List[Task]:
    """Most recently created (or completed, when no creation day is known) first."""
    dated = [task for task in tasks if task.created_at or task.completed_at]
    dated.sort(key=lambda t: t.created_at or t.completed_at, reverse=True)
    return dated[:limit]


# --- Time entries ---

def tracked_time_for_task(entries: Iterable[TimeEntry], task_id: int) -> float:
    return sum(entry.duration for entry in entries if entry.task_id == task_id)


def entries_in_range(entries: Iterable[TimeEntry], start, end) -> List[TimeEntry]:
    """Entries whose start falls on a day within [start, end]."""
    first, last = _day(start), _day(end)
    return [
        entry for entry in entries
        if entry.start_time is not None and first <= entry.start_time.date() <= last
    ]
