from services.store import RecordStore, InMemoryRecordStore
from services.sql_store import SqlRecordStore
from services.tasks import TaskService
from services.projects import ProjectService
from services.time_entries import TimeEntryService
from services.clients import ClientService
from services.bulk import bulk_update_status
from services.workspace import load_workspace

__all__ = [
    'RecordStore',
    'InMemoryRecordStore',
    'SqlRecordStore',
    'TaskService',
    'ProjectService',
    'TimeEntryService',
    'ClientService',
    'bulk_update_status',
    'load_workspace',
]
