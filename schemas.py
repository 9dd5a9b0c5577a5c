from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Union, Literal
from datetime import date, datetime
from enum import Enum
import bleach

ALL = "all"


class TaskStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class ClientStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    PROSPECT = "Prospect"
    LEAD = "Lead"


def sanitize(v: Optional[str]) -> Optional[str]:
    if v:
        # strip every HTML tag and attribute, keep the text content
        return bleach.clean(v, tags=[], attributes={}, strip=True)
    return v


def dedupe_tags(tags: List[str]) -> List[str]:
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class CamelModel(BaseModel):
    # camelCase on the wire (dueDate, projectId, ...), snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Canonical entities ---
class AssigneeRef(CamelModel):
    id: int

    @classmethod
    def from_raw(cls, value) -> Optional["AssigneeRef"]:
        """Accept a raw id, a numeric string or a lookup object ({"Id": 3, ...})."""
        if value is None or value == "":
            return None
        if isinstance(value, AssigneeRef):
            return value
        if isinstance(value, dict):
            value = value.get("Id", value.get("id"))
        if isinstance(value, bool):
            return None
        try:
            return cls(id=int(value))
        except (TypeError, ValueError, OverflowError):
            return None


class Subtask(CamelModel):
    id: int
    title: str
    completed: bool = False


class Task(CamelModel):
    id: int
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    project_id: Optional[int] = None
    assignee: Optional[AssigneeRef] = None
    tags: List[str] = []
    estimated_time: float = 0
    actual_time: float = 0
    subtasks: List[Subtask] = []
    created_at: Optional[date] = None
    completed_at: Optional[date] = None


class Project(CamelModel):
    id: int
    name: str = ""
    description: str = ""
    color: str = "#3b82f6"
    status: str = "Active"
    due_date: Optional[date] = None
    assignee: Optional[AssigneeRef] = None
    created_at: Optional[date] = None


class TimeEntry(CamelModel):
    id: int
    task_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: float = 0


class Client(CamelModel):
    id: int
    full_name: str = ""
    company_name: str = ""
    email: str = ""
    phone_number: str = ""
    industry: str = ""
    client_status: ClientStatus = ClientStatus.ACTIVE
    notes: str = ""
    website: str = ""
    created_date: Optional[date] = None


# --- Input models (form boundary) ---
class TaskUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    project_id: Optional[int] = None
    assignee: Optional[AssigneeRef] = None
    tags: Optional[List[str]] = None
    estimated_time: Optional[float] = Field(None, ge=0)
    subtasks: Optional[List[Subtask]] = None

    @field_validator('title', 'description')
    @classmethod
    def sanitize_input(cls, v: Optional[str]) -> Optional[str]:
        return sanitize(v)

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must not be empty")
        return v

    @field_validator('assignee', mode='before')
    @classmethod
    def resolve_assignee(cls, v):
        return AssigneeRef.from_raw(v)

    @field_validator('tags')
    @classmethod
    def unique_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return dedupe_tags(v) if v is not None else v


class TaskCreate(TaskUpdate):
    title: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: List[str] = []
    estimated_time: float = Field(0, ge=0)
    subtasks: List[Subtask] = []


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[date] = None
    assignee: Optional[AssigneeRef] = None

    @field_validator('name', 'description')
    @classmethod
    def sanitize_input(cls, v: Optional[str]) -> Optional[str]:
        return sanitize(v)

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("name must not be empty")
        return v

    @field_validator('assignee', mode='before')
    @classmethod
    def resolve_assignee(cls, v):
        return AssigneeRef.from_raw(v)


class ProjectCreate(ProjectUpdate):
    name: str
    color: str = "#3b82f6"
    status: str = "Active"


class TimeEntryUpdate(CamelModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[float] = Field(None, ge=0)


class TimeEntryCreate(TimeEntryUpdate):
    task_id: int
    duration: float = Field(0, ge=0)


class ClientUpdate(CamelModel):
    full_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    industry: Optional[str] = None
    client_status: Optional[ClientStatus] = None
    notes: Optional[str] = None
    website: Optional[str] = None

    @field_validator('full_name', 'company_name', 'notes')
    @classmethod
    def sanitize_input(cls, v: Optional[str]) -> Optional[str]:
        return sanitize(v)

    @field_validator('full_name')
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("full name must not be empty")
        return v


class ClientCreate(ClientUpdate):
    full_name: str
    client_status: ClientStatus = ClientStatus.ACTIVE


class StatusChange(BaseModel):
    status: TaskStatus


class TimeLog(BaseModel):
    hours: float = Field(..., gt=0)


class BulkStatusRequest(CamelModel):
    task_ids: List[int]
    status: TaskStatus


# --- Engine inputs and results ---
class TaskFilter(CamelModel):
    search_text: str = ""
    status: Union[Literal["all"], TaskStatus] = ALL
    priority: Union[Literal["all"], TaskPriority] = ALL
    project_id: Union[Literal["all"], int] = ALL
    assignee: Union[Literal["all"], int] = ALL


class MetricsScope(CamelModel):
    project_id: Optional[int] = None
    day: Optional[date] = None
    start: Optional[date] = None
    end: Optional[date] = None
    now: Optional[date] = None


class Metrics(CamelModel):
    total: int
    status_counts: Dict[str, int]
    priority_counts: Dict[str, int]
    completed_count: int
    completion_rate: float
    overdue_count: int
    total_tracked_time: float
    average_time_per_completed_task: float


class ProjectProgress(CamelModel):
    project_id: int
    name: str = ""
    task_count: int
    completed_count: int
    progress: float


class ProductivityPoint(CamelModel):
    day: date = Field(..., alias="date")
    completed_count: int
    created_count: int


class CalendarCell(CamelModel):
    day: date = Field(..., alias="date")
    in_month: bool
    is_today: bool
    tasks: List[Task] = []


class BulkStatusResult(CamelModel):
    succeeded: List[int] = []
    failed: List[int] = []

    @property
    def partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)


class DashboardSummary(CamelModel):
    metrics: Metrics
    recent_tasks: List[Task]
    today_tasks: List[Task]
    active_projects: List[ProjectProgress]
