from datetime import date
from fastapi import Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from services import (
    RecordStore, TaskService, ProjectService, TimeEntryService, ClientService,
)


# --- Record store dependency ---
def get_store(request: Request) -> RecordStore:
    # Owned by the app instance, never a module global
    return request.app.state.store


def get_today(request: Request) -> date:
    return request.app.state.clock()


def _clock(request: Request):
    return request.app.state.clock


# --- Service dependencies ---
def get_task_service(request: Request, store: RecordStore = Depends(get_store)) -> TaskService:
    return TaskService(store, clock=_clock(request))


def get_project_service(request: Request, store: RecordStore = Depends(get_store)) -> ProjectService:
    return ProjectService(store, clock=_clock(request))


def get_time_entry_service(store: RecordStore = Depends(get_store),
                           task_service: TaskService = Depends(get_task_service)) -> TimeEntryService:
    return TimeEntryService(store, task_service)


def get_client_service(request: Request, store: RecordStore = Depends(get_store)) -> ClientService:
    return ClientService(store, clock=_clock(request))


# --- Rate Limiter ---
limiter = Limiter(key_func=get_remote_address)
