from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from dependencies import get_time_entry_service
from schemas import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from services import TimeEntryService

router = APIRouter(
    prefix="/time-entries",
    tags=["time-entries"]
)


@router.get("", response_model=List[TimeEntry])
async def read_time_entries(task_id: Optional[int] = Query(None, alias="taskId"),
                            start: Optional[date] = None,
                            end: Optional[date] = None,
                            service: TimeEntryService = Depends(get_time_entry_service)):
    if (start is None) != (end is None):
        raise HTTPException(status_code=422, detail="start and end must be given together")
    if start is not None:
        entries = await service.list_in_range(start, end)
    else:
        entries = await service.list()
    if task_id is not None:
        entries = [e for e in entries if e.task_id == task_id]
    return entries


@router.post("", response_model=TimeEntry)
async def create_time_entry(entry: TimeEntryCreate,
                            service: TimeEntryService = Depends(get_time_entry_service)):
    return await service.create(entry)


@router.get("/{entry_id}", response_model=TimeEntry)
async def read_time_entry(entry_id: int, service: TimeEntryService = Depends(get_time_entry_service)):
    return await service.get(entry_id)


@router.put("/{entry_id}", response_model=TimeEntry)
async def update_time_entry(entry_id: int, entry: TimeEntryUpdate,
                            service: TimeEntryService = Depends(get_time_entry_service)):
    return await service.update(entry_id, entry)


@router.delete("/{entry_id}")
async def delete_time_entry(entry_id: int, service: TimeEntryService = Depends(get_time_entry_service)):
    await service.delete(entry_id)
    return {"detail": "Time entry deleted"}
