import logging
from datetime import date
from typing import List, Union

from normalizer import to_canonical_project, to_remote_project
from schemas import Project, ProjectCreate, ProjectUpdate
from services.store import RecordStore, PROJECTS, TASKS
from services.tasks import validate_input

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, store: RecordStore, clock=date.today):
        self.store = store
        self.clock = clock

    async def list(self) -> List[Project]:
        return [to_canonical_project(r) for r in await self.store.fetch_records(PROJECTS)]

    async def get(self, project_id: int) -> Project:
        return to_canonical_project(await self.store.get_record(PROJECTS, project_id))

    async def create(self, data: Union[ProjectCreate, dict]) -> Project:
        data = validate_input(ProjectCreate, data)
        fields = data.model_dump()
        fields["created_at"] = self.clock()
        record = to_remote_project(fields)
        record["tasks_c"] = ""
        project = to_canonical_project(await self.store.create_record(PROJECTS, record))
        logger.info("Created project %s", project.id)
        return project

    async def update(self, project_id: int, data: Union[ProjectUpdate, dict]) -> Project:
        data = validate_input(ProjectUpdate, data)
        record = to_remote_project(data.model_dump(exclude_unset=True))
        return to_canonical_project(await self.store.update_record(PROJECTS, project_id, record))

    async def delete(self, project_id: int) -> bool:
        # Tasks keep their project_id; deleting a project never touches them
        deleted = await self.store.delete_record(PROJECTS, project_id)
        logger.info("Deleted project %s", project_id)
        return deleted

    async def rebuild_membership_cache(self, project_id: int) -> List[int]:
        """
        Rewrite the project's stored task-id list from the tasks that point at
        it. The stored list is only a cache for the backend; membership is
        always derived from task.project_id.
        """
        await self.store.get_record(PROJECTS, project_id)
        records = await self.store.fetch_records(TASKS, where={"project_id_c": int(project_id)})
        task_ids = sorted(int(r["Id"]) for r in records)
        await self.store.update_record(
            PROJECTS, project_id, {"tasks_c": ",".join(str(i) for i in task_ids)}
        )
        return task_ids
