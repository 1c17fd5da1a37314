"""Time tracking endpoints"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cowork.database import get_db
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.schemas import (
    ActiveTimerEnvelope,
    TaskTimeLogsEnvelope,
    TimeLogsEnvelope,
    TimerStart,
    TimerStartEnvelope,
    TimerStop,
    TimerStopEnvelope,
)
from cowork.services import time_logs as time_log_service

router = APIRouter()


@router.post("/start", response_model=TimerStartEnvelope)
def start_timer(
    timer_in: TimerStart,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Start a timer on a task, stopping whatever timer the caller had running."""
    result = time_log_service.start_timer(db, timer_in.task_id, caller)
    return TimerStartEnvelope(
        time_log=time_log_service.serialize(result.time_log),
        message="Timer started",
        auto_stopped=result.auto_stopped_task_id,
    )


@router.post("/stop", response_model=TimerStopEnvelope)
def stop_timer(
    timer_in: Optional[TimerStop] = None,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    time_log = time_log_service.stop_timer(db, caller, timer_in.task_id if timer_in else None)
    return TimerStopEnvelope(
        time_log=time_log_service.serialize(time_log),
        message="Timer stopped",
        duration_seconds=time_log.duration_seconds,
    )


@router.get("/active", response_model=ActiveTimerEnvelope)
def get_active_timer(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    time_log = time_log_service.active_timer(db, caller)
    return ActiveTimerEnvelope(active_timer=time_log_service.serialize(time_log) if time_log else None)


@router.get("/task/{task_id}", response_model=TaskTimeLogsEnvelope)
def list_task_time_logs(
    task_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    logs, total = time_log_service.task_logs(db, task_id, caller)
    return TaskTimeLogsEnvelope(
        time_logs=[time_log_service.serialize(log) for log in logs],
        total_seconds=total,
    )


@router.get("/my", response_model=TimeLogsEnvelope)
def list_my_time_logs(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(time_log_service.MY_LOGS_LIMIT, ge=1, le=100),
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    logs = time_log_service.my_logs(db, caller, start_date=start_date, end_date=end_date, limit=limit)
    return TimeLogsEnvelope(time_logs=[time_log_service.serialize(log) for log in logs])
