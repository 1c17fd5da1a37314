"""Schemas for tasks"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator

from cowork.models.task import TaskPriority, TaskStatus
from cowork.schemas.collaborator import CollaboratorResponse

DATE_RANGE_MESSAGE = "End date must be equal to or later than start date"


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TaskCreate(BaseModel):
    project_id: int
    title_uz: Optional[str] = None
    title_jp: Optional[str] = None
    title_en: Optional[str] = None
    desc_uz: Optional[str] = None
    desc_jp: Optional[str] = None
    desc_en: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.MID
    assigned_to: Optional[int] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskUpdate(BaseModel):
    title_uz: Optional[str] = None
    title_jp: Optional[str] = None
    title_en: Optional[str] = None
    desc_uz: Optional[str] = None
    desc_jp: Optional[str] = None
    desc_en: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    deadline: Optional[datetime] = None
    assigned_to: Optional[int] = None

    @field_validator("status", "priority")
    @classmethod
    def reject_null(cls, value):
        # Optional only so the field can be omitted; the columns are NOT NULL.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    @model_validator(mode="after")
    def check_date_range(self):
        start, end = as_naive_utc(self.start_date), as_naive_utc(self.end_date)
        if start and end and end < start:
            raise ValueError(DATE_RANGE_MESSAGE)
        return self


class TaskResponse(BaseModel):
    id: int
    project_id: int
    title_uz: Optional[str]
    title_jp: Optional[str]
    title_en: Optional[str]
    title_display: str
    desc_uz: Optional[str]
    desc_jp: Optional[str]
    desc_en: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    deadline: Optional[datetime]
    assigned_to: Optional[int]
    created_at: datetime
    updated_at: datetime
    collaborators: List[CollaboratorResponse] = []

    class Config:
        from_attributes = True


class TaskEnvelope(BaseModel):
    task: TaskResponse
    message: Optional[str] = None


class TasksEnvelope(BaseModel):
    tasks: List[TaskResponse]
