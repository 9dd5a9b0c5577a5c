import logging
from datetime import date
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError
from normalizer import to_canonical_task, to_remote_task
from schemas import Task, TaskCreate, TaskUpdate, TaskStatus, TaskPriority
from services.store import RecordStore, TASKS
from aggregator import overdue_tasks

logger = logging.getLogger(__name__)


def validate_input(model, data):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(str(e)) from e


def completed_at_for(current: Optional[Task], new_status: TaskStatus, today: date) -> Optional[date]:
    """completed_at is set on entering Completed, kept while Completed, cleared otherwise."""
    if new_status != TaskStatus.COMPLETED:
        return None
    if current is not None and current.status == TaskStatus.COMPLETED and current.completed_at:
        return current.completed_at
    return today


class TaskService:
    def __init__(self, store: RecordStore, clock=date.today):
        self.store = store
        self.clock = clock

    async def list(self) -> List[Task]:
        return [to_canonical_task(r) for r in await self.store.fetch_records(TASKS)]

    async def get(self, task_id: int) -> Task:
        return to_canonical_task(await self.store.get_record(TASKS, task_id))

    async def list_by_project(self, project_id: int) -> List[Task]:
        records = await self.store.fetch_records(TASKS, where={"project_id_c": int(project_id)})
        return [to_canonical_task(r) for r in records]

    async def list_by_status(self, status: Union[TaskStatus, str]) -> List[Task]:
        status = TaskStatus(status)
        return [t for t in await self.list() if t.status == status]

    async def list_by_priority(self, priority: Union[TaskPriority, str]) -> List[Task]:
        priority = TaskPriority(priority)
        return [t for t in await self.list() if t.priority == priority]

    async def list_overdue(self, now: Optional[date] = None) -> List[Task]:
        return overdue_tasks(await self.list(), now or self.clock())

    async def create(self, data: Union[TaskCreate, dict]) -> Task:
        data = validate_input(TaskCreate, data)
        fields = data.model_dump()
        today = self.clock()
        fields["actual_time"] = 0
        fields["created_at"] = today
        fields["completed_at"] = completed_at_for(None, data.status, today)
        record = await self.store.create_record(TASKS, to_remote_task(fields))
        task = to_canonical_task(record)
        logger.info("Created task %s", task.id)
        return task

    async def update(self, task_id: int, data: Union[TaskUpdate, dict]) -> Task:
        data = validate_input(TaskUpdate, data)
        changes = data.model_dump(exclude_unset=True)
        if "status" in changes:
            if changes["status"] is None:
                raise ValidationError("status must not be null")
            current = await self.get(task_id)
            changes["completed_at"] = completed_at_for(current, changes["status"], self.clock())
        record = await self.store.update_record(TASKS, task_id, to_remote_task(changes))
        return to_canonical_task(record)

    async def delete(self, task_id: int) -> bool:
        deleted = await self.store.delete_record(TASKS, task_id)
        logger.info("Deleted task %s", task_id)
        return deleted

    async def set_status(self, task_id: int, status: Union[TaskStatus, str]) -> Task:
        try:
            status = TaskStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status {status!r}")
        return await self.update(task_id, TaskUpdate(status=status))

    async def add_time_entry(self, task_id: int, hours: float) -> Task:
        if isinstance(hours, bool) or not isinstance(hours, (int, float)) or hours < 0:
            raise ValidationError(f"Tracked hours must be a non-negative number, got {hours!r}")
        current = await self.get(task_id)
        record = await self.store.update_record(
            TASKS, task_id, to_remote_task({"actual_time": current.actual_time + hours})
        )
        return to_canonical_task(record)
