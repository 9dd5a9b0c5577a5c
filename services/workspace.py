import asyncio
from typing import List, Tuple

from schemas import Task, Project
from services.projects import ProjectService
from services.tasks import TaskService


async def load_workspace(task_service: TaskService,
                         project_service: ProjectService) -> Tuple[List[Task], List[Project]]:
    """Load tasks and projects concurrently; returns once both have settled."""
    tasks, projects = await asyncio.gather(task_service.list(), project_service.list())
    return tasks, projects
