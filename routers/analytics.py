from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from aggregator import (
    aggregate, productivity_series, time_range_days, top_projects,
    recent_tasks, project_progress,
)
from calendar_buckets import tasks_on
from dependencies import get_task_service, get_project_service, get_today
from schemas import (
    Metrics, MetricsScope, ProductivityPoint, ProjectProgress, DashboardSummary,
)
from services import TaskService, ProjectService, load_workspace

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"]
)


@router.get("/metrics", response_model=Metrics)
async def read_metrics(project_id: Optional[int] = Query(None, alias="projectId"),
                       day: Optional[date] = None,
                       start: Optional[date] = None,
                       end: Optional[date] = None,
                       today: date = Depends(get_today),
                       service: TaskService = Depends(get_task_service)):
    scope = MetricsScope(project_id=project_id, day=day, start=start, end=end, now=today)
    return aggregate(await service.list(), scope)


@router.get("/productivity", response_model=List[ProductivityPoint])
async def read_productivity(time_range: str = Query("7days", alias="range"),
                            today: date = Depends(get_today),
                            service: TaskService = Depends(get_task_service)):
    return list(productivity_series(await service.list(), time_range_days(time_range), today))


@router.get("/top-projects", response_model=List[ProjectProgress])
async def read_top_projects(limit: Optional[int] = Query(None, ge=1),
                            service: TaskService = Depends(get_task_service),
                            project_service: ProjectService = Depends(get_project_service)):
    tasks, projects = await load_workspace(service, project_service)
    return top_projects(projects, tasks, limit)


@router.get("/dashboard", response_model=DashboardSummary)
async def read_dashboard(today: date = Depends(get_today),
                         service: TaskService = Depends(get_task_service),
                         project_service: ProjectService = Depends(get_project_service)):
    tasks, projects = await load_workspace(service, project_service)
    return DashboardSummary(
        metrics=aggregate(tasks, MetricsScope(now=today)),
        recent_tasks=recent_tasks(tasks),
        today_tasks=tasks_on(today, tasks),
        active_projects=[project_progress(p, tasks) for p in projects[:4]],
    )
