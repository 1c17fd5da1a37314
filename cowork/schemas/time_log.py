"""Schemas for task time tracking"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class TimerStart(BaseModel):
    task_id: int


class TimerStop(BaseModel):
    task_id: Optional[int] = None


class TimeLogResponse(BaseModel):
    id: int
    user_id: int
    task_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    task_title: Optional[str] = None
    project_id: Optional[int] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class TimerStartEnvelope(BaseModel):
    time_log: TimeLogResponse
    message: str
    auto_stopped: Optional[int] = None


class TimerStopEnvelope(BaseModel):
    time_log: TimeLogResponse
    message: str
    duration_seconds: int


class ActiveTimerEnvelope(BaseModel):
    active_timer: Optional[TimeLogResponse] = None


class TaskTimeLogsEnvelope(BaseModel):
    time_logs: List[TimeLogResponse]
    total_seconds: int


class TimeLogsEnvelope(BaseModel):
    time_logs: List[TimeLogResponse]
