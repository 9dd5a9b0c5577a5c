from sqlalchemy import Column, Integer, String, Float
from database import Base
from encryption import EncryptedString

# Column names mirror the backend record schema one to one, so a row
# converts to a remote record without a second mapping table.


class TaskRecord(Base):
    __tablename__ = "task_c"
    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String)
    title_c = Column(String)
    # Free text is encrypted at rest
    description_c = Column(EncryptedString)
    status_c = Column(String)
    priority_c = Column(String)
    due_date_c = Column(String)  # YYYY-MM-DD
    project_id_c = Column(Integer, index=True)
    assignee_c = Column(Integer)
    tags_c = Column(String)  # comma joined
    estimated_time_c = Column(Float)
    actual_time_c = Column(Float)
    subtasks_c = Column(String)  # JSON as string
    created_at_c = Column(String)
    completed_at_c = Column(String)


class ProjectRecord(Base):
    __tablename__ = "project_c"
    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String)
    name_c = Column(String)
    description_c = Column(EncryptedString)
    color_c = Column(String)
    status_c = Column(String)
    due_date_c = Column(String)
    assignee_c = Column(Integer)
    created_at_c = Column(String)
    tasks_c = Column(String)  # denormalized, rebuilt from task_c.project_id_c


class TimeEntryRecord(Base):
    __tablename__ = "time_entry_c"
    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String)
    task_id_c = Column(Integer, index=True)
    start_time_c = Column(String)
    end_time_c = Column(String)
    duration_c = Column(Float)


class ClientRecord(Base):
    __tablename__ = "client_c"
    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String)
    full_name_c = Column(String)
    company_name_c = Column(String)
    email_c = Column(String)
    phone_number_c = Column(String)
    industry_c = Column(String)
    client_status_c = Column(String)
    notes_c = Column(EncryptedString)
    website_c = Column(String)
    created_date_c = Column(String)


RECORD_TABLES = {
    TaskRecord.__tablename__: TaskRecord,
    ProjectRecord.__tablename__: ProjectRecord,
    TimeEntryRecord.__tablename__: TimeEntryRecord,
    ClientRecord.__tablename__: ClientRecord,
}
