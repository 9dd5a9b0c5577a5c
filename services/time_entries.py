import logging
from datetime import datetime, timedelta
from typing import List, Union

from aggregator import tracked_time_for_task, entries_in_range
from errors import ValidationError
from normalizer import to_canonical_time_entry, to_remote_time_entry
from schemas import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from services.store import RecordStore, TIME_ENTRIES
from services.tasks import TaskService, validate_input

logger = logging.getLogger(__name__)


class TimeEntryService:
    def __init__(self, store: RecordStore, task_service: TaskService, clock=datetime.now):
        self.store = store
        self.task_service = task_service
        self.clock = clock

    async def list(self) -> List[TimeEntry]:
        return [to_canonical_time_entry(r) for r in await self.store.fetch_records(TIME_ENTRIES)]

    async def get(self, entry_id: int) -> TimeEntry:
        return to_canonical_time_entry(await self.store.get_record(TIME_ENTRIES, entry_id))

    async def list_by_task(self, task_id: int) -> List[TimeEntry]:
        records = await self.store.fetch_records(TIME_ENTRIES, where={"task_id_c": int(task_id)})
        return [to_canonical_time_entry(r) for r in records]

    async def create(self, data: Union[TimeEntryCreate, dict]) -> TimeEntry:
        """Record a tracked interval and add its duration to the task's actual time."""
        data = validate_input(TimeEntryCreate, data)
        await self.task_service.get(data.task_id)
        fields = data.model_dump()
        now = self.clock()
        if fields.get("end_time") is None:
            fields["end_time"] = now
        if fields.get("start_time") is None:
            try:
                fields["start_time"] = fields["end_time"] - timedelta(hours=data.duration)
            except OverflowError:
                raise ValidationError(f"Duration of {data.duration} hours is out of range")
        entry = to_canonical_time_entry(
            await self.store.create_record(TIME_ENTRIES, to_remote_time_entry(fields))
        )
        await self.task_service.add_time_entry(data.task_id, data.duration)
        logger.info("Tracked %.2fh on task %s", data.duration, data.task_id)
        return entry

    async def update(self, entry_id: int, data: Union[TimeEntryUpdate, dict]) -> TimeEntry:
        data = validate_input(TimeEntryUpdate, data)
        record = to_remote_time_entry(data.model_dump(exclude_unset=True))
        return to_canonical_time_entry(await self.store.update_record(TIME_ENTRIES, entry_id, record))

    async def delete(self, entry_id: int) -> bool:
        return await self.store.delete_record(TIME_ENTRIES, entry_id)

    async def total_for_task(self, task_id: int) -> float:
        return tracked_time_for_task(await self.list_by_task(task_id), int(task_id))

    async def list_in_range(self, start, end) -> List[TimeEntry]:
        return entries_in_range(await self.list(), start, end)
