from fastapi import APIRouter, Depends
from typing import List

from aggregator import project_progress
from dependencies import get_project_service, get_task_service
from schemas import Project, ProjectCreate, ProjectUpdate, ProjectProgress, Task
from services import ProjectService, TaskService

router = APIRouter(
    prefix="/projects",
    tags=["projects"]
)


@router.get("", response_model=List[Project])
async def read_projects(service: ProjectService = Depends(get_project_service)):
    return await service.list()


@router.post("", response_model=Project)
async def create_project(project: ProjectCreate, service: ProjectService = Depends(get_project_service)):
    return await service.create(project)


@router.get("/{project_id}", response_model=Project)
async def read_project(project_id: int, service: ProjectService = Depends(get_project_service)):
    return await service.get(project_id)


@router.put("/{project_id}", response_model=Project)
async def update_project(project_id: int, project: ProjectUpdate,
                         service: ProjectService = Depends(get_project_service)):
    return await service.update(project_id, project)


@router.delete("/{project_id}")
async def delete_project(project_id: int, service: ProjectService = Depends(get_project_service)):
    await service.delete(project_id)
    return {"detail": "Project deleted. Its tasks were kept."}


@router.get("/{project_id}/tasks", response_model=List[Task])
async def read_project_tasks(project_id: int,
                             service: ProjectService = Depends(get_project_service),
                             task_service: TaskService = Depends(get_task_service)):
    await service.get(project_id)
    return await task_service.list_by_project(project_id)


@router.get("/{project_id}/progress", response_model=ProjectProgress)
async def read_project_progress(project_id: int,
                                service: ProjectService = Depends(get_project_service),
                                task_service: TaskService = Depends(get_task_service)):
    project = await service.get(project_id)
    return project_progress(project, await task_service.list_by_project(project_id))
