from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from calendar_buckets import month_grid, week_slice, tasks_on
from dependencies import get_task_service, get_today
from schemas import CalendarCell, Task
from services import TaskService

router = APIRouter(
    prefix="/calendar",
    tags=["calendar"]
)


@router.get("/month", response_model=List[CalendarCell])
async def read_month(year: Optional[int] = None,
                     month: Optional[int] = Query(None, ge=1, le=12),
                     today: date = Depends(get_today),
                     service: TaskService = Depends(get_task_service)):
    year = year or today.year
    month = month or today.month
    # the grid spills into the neighbouring years
    if not 2 <= year <= 9998:
        raise HTTPException(status_code=422, detail="year out of range")
    return month_grid(year, month, await service.list(), today)


@router.get("/week", response_model=List[Task])
async def read_week(anchor: Optional[date] = None,
                    today: date = Depends(get_today),
                    service: TaskService = Depends(get_task_service)):
    return week_slice(anchor or today, await service.list())


@router.get("/day", response_model=List[Task])
async def read_day(day: Optional[date] = Query(None, alias="date"),
                   today: date = Depends(get_today),
                   service: TaskService = Depends(get_task_service)):
    return tasks_on(day or today, await service.list())
