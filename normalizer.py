"""
Translation between the backend record schema and the canonical entities.

Remote records are plain dicts keyed by the backend's field names
(``title_c``, ``due_date_c``, ...). Reading never raises on malformed stored
data: every field degrades to a documented default. Writing emits only the
fields present in the partial input, so an update never clobbers fields the
caller did not touch.
"""
import json
import logging
import math
from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from schemas import (
    Task, Project, TimeEntry, Client, Subtask, AssigneeRef,
    TaskStatus, TaskPriority, ClientStatus, dedupe_tags,
)

logger = logging.getLogger(__name__)


# --- Scalar coercion ---

def to_number(value, default: float = 0.0, minimum: Optional[float] = None) -> float:
    """Parse a number, falling back to ``default`` instead of raising or returning NaN."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable number %r, using %s", value, default)
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if minimum is not None and number < minimum:
        return minimum
    return number


def to_hours(value) -> float:
    return to_number(value, minimum=0.0)


def to_optional_int(value) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        value = value.get("Id", value.get("id"))
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def parse_day(value) -> Optional[date]:
    """Calendar day from a date, datetime or ISO string. Time of day is dropped."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug("Unparseable day %r", value)
        return None


def format_day(value) -> Optional[str]:
    day = parse_day(value)
    return day.isoformat() if day else None


def parse_timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


def format_timestamp(value) -> Optional[str]:
    stamp = parse_timestamp(value)
    return stamp.isoformat() if stamp else None


def _text(value) -> str:
    return "" if value is None else str(value)


def _enum(enum_cls, default):
    def decode(value):
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            return default
    return decode


def _enum_value(value):
    if value is None:
        return None
    return getattr(value, "value", value)


def normalize_assignee(value) -> Optional[AssigneeRef]:
    return AssigneeRef.from_raw(value)


def _assignee_id(value) -> Optional[int]:
    ref = AssigneeRef.from_raw(value)
    return ref.id if ref else None


# --- Sub-structures ---

def parse_tags(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return dedupe_tags([str(v) for v in value])
    return dedupe_tags(str(value).split(","))


def join_tags(tags) -> str:
    if not tags:
        return ""
    return ",".join(tags)


def _flag(value) -> bool:
    # only real booleans and "true"/"false" strings count, anything else is False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def _subtask(item, index: int) -> Subtask:
    if isinstance(item, Subtask):
        return item
    if isinstance(item, dict):
        subtask_id = to_optional_int(item.get("id"))
        return Subtask(
            id=index + 1 if subtask_id is None else subtask_id,
            title=_text(item.get("title")).strip(),
            completed=_flag(item.get("completed")),
        )
    return Subtask(id=index + 1, title=_text(item).strip(), completed=False)


def parse_subtasks(value) -> List[Subtask]:
    """
    Decode stored subtasks. JSON arrays are the current format; anything not
    starting with ``[`` is a legacy comma separated list of titles.
    """
    if not value:
        return []
    if isinstance(value, list):
        return [_subtask(item, i) for i, item in enumerate(value)]
    text = str(value).strip()
    if text.startswith("["):
        try:
            items = json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Malformed subtasks JSON, treating as empty")
            return []
        if not isinstance(items, list):
            return []
        return [_subtask(item, i) for i, item in enumerate(items)]
    titles = [t.strip() for t in text.split(",") if t.strip()]
    return [Subtask(id=i + 1, title=title, completed=False) for i, title in enumerate(titles)]


def dump_subtasks(subtasks) -> str:
    items = [_subtask(s, i) for i, s in enumerate(subtasks or [])]
    return json.dumps([s.model_dump() for s in items])


# --- Field maps: (canonical name, remote name, decode, encode) ---

def _identity(value):
    return value


TASK_FIELDS = [
    ("id", "Id", to_optional_int, _identity),
    ("title", "title_c", _text, _text),
    ("description", "description_c", _text, _text),
    ("status", "status_c", _enum(TaskStatus, TaskStatus.TODO), _enum_value),
    ("priority", "priority_c", _enum(TaskPriority, TaskPriority.MEDIUM), _enum_value),
    ("due_date", "due_date_c", parse_day, format_day),
    ("project_id", "project_id_c", to_optional_int, to_optional_int),
    ("assignee", "assignee_c", normalize_assignee, _assignee_id),
    ("tags", "tags_c", parse_tags, join_tags),
    ("estimated_time", "estimated_time_c", to_hours, to_hours),
    ("actual_time", "actual_time_c", to_hours, to_hours),
    ("subtasks", "subtasks_c", parse_subtasks, dump_subtasks),
    ("created_at", "created_at_c", parse_day, format_day),
    ("completed_at", "completed_at_c", parse_day, format_day),
]

PROJECT_FIELDS = [
    ("id", "Id", to_optional_int, _identity),
    ("name", "name_c", _text, _text),
    ("description", "description_c", _text, _text),
    ("color", "color_c", lambda v: _text(v) or "#3b82f6", _text),
    ("status", "status_c", lambda v: _text(v) or "Active", _text),
    ("due_date", "due_date_c", parse_day, format_day),
    ("assignee", "assignee_c", normalize_assignee, _assignee_id),
    ("created_at", "created_at_c", parse_day, format_day),
]

TIME_ENTRY_FIELDS = [
    ("id", "Id", to_optional_int, _identity),
    ("task_id", "task_id_c", to_optional_int, to_optional_int),
    ("start_time", "start_time_c", parse_timestamp, format_timestamp),
    ("end_time", "end_time_c", parse_timestamp, format_timestamp),
    ("duration", "duration_c", to_hours, to_hours),
]

CLIENT_FIELDS = [
    ("id", "Id", to_optional_int, _identity),
    ("full_name", "full_name_c", _text, _text),
    ("company_name", "company_name_c", _text, _text),
    ("email", "email_c", _text, _text),
    ("phone_number", "phone_number_c", _text, _text),
    ("industry", "industry_c", _text, _text),
    ("client_status", "client_status_c", _enum(ClientStatus, ClientStatus.ACTIVE), _enum_value),
    ("notes", "notes_c", _text, _text),
    ("website", "website_c", _text, _text),
    ("created_date", "created_date_c", parse_day, format_day),
]

# The display name column every backend table carries
NAME_SOURCE = {"task_c": "title", "project_c": "name", "client_c": "full_name"}


def _decode(record: dict, fields) -> dict:
    return {name: decode(record.get(remote)) for name, remote, decode, _ in fields}


def _encode(partial, fields, name_source: Optional[str] = None) -> dict:
    if isinstance(partial, BaseModel):
        partial = partial.model_dump(exclude_unset=True)
    by_name = {}
    for name, remote, _, encode in fields:
        by_name[name] = (remote, encode)
        by_name[to_camel(name)] = (remote, encode)
    record = {}
    for key, value in partial.items():
        if key not in by_name:
            continue
        remote, encode = by_name[key]
        record[remote] = None if value is None else encode(value)
        if name_source and key in (name_source, to_camel(name_source)):
            record["Name"] = record[remote]
    return record


def to_canonical_task(record: dict) -> Task:
    values = _decode(record, TASK_FIELDS)
    if not values["title"] and record.get("Name"):
        values["title"] = _text(record["Name"])
    return Task(**values)


def to_remote_task(partial) -> dict:
    return _encode(partial, TASK_FIELDS, "title")


def to_canonical_project(record: dict) -> Project:
    values = _decode(record, PROJECT_FIELDS)
    if not values["name"] and record.get("Name"):
        values["name"] = _text(record["Name"])
    return Project(**values)


def to_remote_project(partial) -> dict:
    return _encode(partial, PROJECT_FIELDS, "name")


def to_canonical_time_entry(record: dict) -> TimeEntry:
    return TimeEntry(**_decode(record, TIME_ENTRY_FIELDS))


def to_remote_time_entry(partial) -> dict:
    return _encode(partial, TIME_ENTRY_FIELDS)


def to_canonical_client(record: dict) -> Client:
    values = _decode(record, CLIENT_FIELDS)
    if not values["full_name"] and record.get("Name"):
        values["full_name"] = _text(record["Name"])
    return Client(**values)


def to_remote_client(partial) -> dict:
    return _encode(partial, CLIENT_FIELDS, "full_name")
