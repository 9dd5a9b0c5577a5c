import asyncio
import logging
from typing import Iterable, Optional, Set, Union

from errors import CollaboratorUnavailable, ValidationError
from schemas import BulkStatusResult, TaskStatus
from services.tasks import TaskService

logger = logging.getLogger(__name__)


async def bulk_update_status(task_service: TaskService, task_ids: Iterable[int],
                             new_status: Union[TaskStatus, str],
                             selection: Optional[Set[int]] = None) -> BulkStatusResult:
    """
    Apply one status to every id independently. Successful updates are never
    rolled back when others fail; the result lists both sides in request order.

    Raises CollaboratorUnavailable only when every single update failed
    because the record store was unreachable, and ValidationError for an
    unknown status or a non-integer id.
    """
    requested = list(task_ids)
    task_ids = []
    try:
        try:
            new_status = TaskStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown status {new_status!r}")
        try:
            task_ids = list(dict.fromkeys(int(i) for i in requested))
        except (TypeError, ValueError):
            raise ValidationError(f"Task ids must be integers, got {requested!r}")
        outcomes = await asyncio.gather(
            *(task_service.set_status(task_id, new_status) for task_id in task_ids),
            return_exceptions=True,
        )
    finally:
        # selection is UI state and is cleared whether or not the update landed
        if selection is not None:
            selection.difference_update(requested)
            selection.difference_update(task_ids)

    result = BulkStatusResult()
    for task_id, outcome in zip(task_ids, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning("Bulk status update failed for task %s: %s", task_id, outcome)
            result.failed.append(task_id)
        else:
            result.succeeded.append(task_id)

    if task_ids and all(isinstance(o, CollaboratorUnavailable) for o in outcomes):
        raise outcomes[0]
    return result
