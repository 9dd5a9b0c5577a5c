from typing import Iterable, List, Optional, Union

from schemas import Task, TaskFilter, ALL


def _matches_search(task: Task, search_text: str) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return needle in (task.title or "").lower() or needle in (task.description or "").lower()


def _matches(value, wanted) -> bool:
    # A task without the field only ever matches the "all" sentinel
    if wanted == ALL:
        return True
    if value is None:
        return False
    return value == wanted


def _assignee_id(task: Task) -> Optional[int]:
    return task.assignee.id if task.assignee else None


def task_matches(task: Task, predicates: TaskFilter) -> bool:
    return (
        _matches_search(task, predicates.search_text)
        and _matches(task.status, predicates.status)
        and _matches(task.priority, predicates.priority)
        and _matches(task.project_id, predicates.project_id)
        and _matches(_assignee_id(task), predicates.assignee)
    )


def filter_tasks(tasks: Iterable[Task], predicates: Union[TaskFilter, dict, None] = None) -> List[Task]:
    """
    Conjunction of the search, status, priority, project and assignee filters.

    Returns a new list in input order; the input collection is never touched.
    """
    if predicates is None:
        predicates = TaskFilter()
    elif isinstance(predicates, dict):
        predicates = TaskFilter(**predicates)
    return [task for task in tasks if task_matches(task, predicates)]
