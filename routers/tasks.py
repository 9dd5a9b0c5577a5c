import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Query
from pydantic import ValidationError as PydanticValidationError
from typing import List

from config import RATE_LIMIT_BULK
from dependencies import get_task_service, get_project_service, limiter
from errors import NotFoundError
from filters import filter_tasks
from schemas import (
    Task, TaskCreate, TaskUpdate, TaskFilter, StatusChange, TimeLog,
    BulkStatusRequest, BulkStatusResult,
)
from services import TaskService, ProjectService, bulk_update_status

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"]
)


async def sync_membership(project_service: ProjectService, *project_ids):
    """Refresh the stored task-id cache of every project a change touched."""
    for project_id in {p for p in project_ids if p is not None}:
        try:
            await project_service.rebuild_membership_cache(project_id)
        except NotFoundError:
            # Tasks may point at a deleted project (no cascade)
            logger.info("Project %s no longer exists, cache not rebuilt", project_id)


@router.get("", response_model=List[Task])
async def read_tasks(
    search: str = "",
    status: str = "all",
    priority: str = "all",
    project_id: str = Query("all", alias="projectId"),
    assignee: str = "all",
    service: TaskService = Depends(get_task_service),
):
    try:
        predicates = TaskFilter(
            search_text=search, status=status, priority=priority,
            project_id=project_id, assignee=assignee,
        )
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return filter_tasks(await service.list(), predicates)


@router.post("", response_model=Task)
async def create_task(task: TaskCreate,
                      service: TaskService = Depends(get_task_service),
                      project_service: ProjectService = Depends(get_project_service)):
    created = await service.create(task)
    await sync_membership(project_service, created.project_id)
    return created


@router.post("/bulk-status", response_model=BulkStatusResult)
@limiter.limit(RATE_LIMIT_BULK)
async def bulk_status(request: Request, body: BulkStatusRequest,
                      service: TaskService = Depends(get_task_service)):
    return await bulk_update_status(service, body.task_ids, body.status)


@router.get("/{task_id}", response_model=Task)
async def read_task(task_id: int, service: TaskService = Depends(get_task_service)):
    return await service.get(task_id)


@router.put("/{task_id}", response_model=Task)
async def update_task(task_id: int, task: TaskUpdate,
                      service: TaskService = Depends(get_task_service),
                      project_service: ProjectService = Depends(get_project_service)):
    before = await service.get(task_id)
    updated = await service.update(task_id, task)
    if before.project_id != updated.project_id:
        await sync_membership(project_service, before.project_id, updated.project_id)
    return updated


@router.post("/{task_id}/status", response_model=Task)
async def change_status(task_id: int, body: StatusChange,
                        service: TaskService = Depends(get_task_service)):
    return await service.set_status(task_id, body.status)


@router.post("/{task_id}/time", response_model=Task)
async def track_time(task_id: int, body: TimeLog,
                     service: TaskService = Depends(get_task_service)):
    return await service.add_time_entry(task_id, body.hours)


@router.delete("/{task_id}")
async def delete_task(task_id: int,
                      service: TaskService = Depends(get_task_service),
                      project_service: ProjectService = Depends(get_project_service)):
    task = await service.get(task_id)
    await service.delete(task_id)
    await sync_membership(project_service, task.project_id)
    return {"detail": "Task deleted"}
