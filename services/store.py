import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from errors import NotFoundError

logger = logging.getLogger(__name__)

TASKS = "task_c"
PROJECTS = "project_c"
TIME_ENTRIES = "time_entry_c"
CLIENTS = "client_c"

ENTITY_NAMES = {
    TASKS: "Task",
    PROJECTS: "Project",
    TIME_ENTRIES: "Time entry",
    CLIENTS: "Client",
}


class RecordStore(ABC):
    """
    Async record access against the backend tables. Records are dicts keyed
    by remote field names; every record carries its integer ``Id``.

    Implementations raise NotFoundError for unknown ids and
    CollaboratorUnavailable when the backend cannot be reached.
    """

    @abstractmethod
    async def fetch_records(self, table: str, where: Optional[Dict] = None) -> List[dict]:
        ...

    @abstractmethod
    async def get_record(self, table: str, record_id: int) -> dict:
        ...

    @abstractmethod
    async def create_record(self, table: str, record: dict) -> dict:
        ...

    @abstractmethod
    async def update_record(self, table: str, record_id: int, record: dict) -> dict:
        ...

    @abstractmethod
    async def delete_record(self, table: str, record_id: int) -> bool:
        ...


def matches_where(record: dict, where: Optional[Dict]) -> bool:
    if not where:
        return True
    return all(record.get(field) == value for field, value in where.items())


class InMemoryRecordStore(RecordStore):
    """
    Offline fallback used for local development and tests. Each instance owns
    its tables; records are copied on the way in and out so callers can never
    mutate stored state.
    """

    def __init__(self, seed: Optional[Dict[str, List[dict]]] = None):
        self.tables: Dict[str, Dict[int, dict]] = {name: {} for name in ENTITY_NAMES}
        for table, records in (seed or {}).items():
            for record in records:
                self.tables.setdefault(table, {})[int(record["Id"])] = copy.deepcopy(record)

    def _table(self, table: str) -> Dict[int, dict]:
        return self.tables.setdefault(table, {})

    def _require(self, table: str, record_id: int) -> dict:
        rows = self._table(table)
        record_id = int(record_id)
        if record_id not in rows:
            raise NotFoundError(ENTITY_NAMES.get(table, table), record_id)
        return rows[record_id]

    async def fetch_records(self, table, where=None):
        return [copy.deepcopy(r) for r in self._table(table).values() if matches_where(r, where)]

    async def get_record(self, table, record_id):
        return copy.deepcopy(self._require(table, record_id))

    async def create_record(self, table, record):
        rows = self._table(table)
        new_id = max(rows.keys(), default=0) + 1
        stored = copy.deepcopy(record)
        stored["Id"] = new_id
        rows[new_id] = stored
        logger.debug("Created %s %s in memory", table, new_id)
        return copy.deepcopy(stored)

    async def update_record(self, table, record_id, record):
        stored = self._require(table, record_id)
        changes = {k: v for k, v in copy.deepcopy(record).items() if k != "Id"}
        stored.update(changes)
        return copy.deepcopy(stored)

    async def delete_record(self, table, record_id):
        self._require(table, record_id)
        del self._table(table)[int(record_id)]
        return True
