"""
Per-user task timers.

A user has at most one running timer (``end_time`` is NULL). Starting a new
one stops the running timer first, in the same transaction.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from cowork.database import unit_of_work
from cowork.dependencies import CallerIdentity
from cowork.errors import NotFound
from cowork.models import Task, TimeLog
from cowork.schemas import TimeLogResponse
from cowork.schemas.task import as_naive_utc
from cowork.services.access import require_any_membership

logger = logging.getLogger(__name__)

MY_LOGS_LIMIT = 20


@dataclass
class StartResult:
    time_log: TimeLog
    auto_stopped_task_id: Optional[int]


def _running_timer(db: Session, user_id: int, task_id: Optional[int] = None) -> Optional[TimeLog]:
    query = db.query(TimeLog).filter(TimeLog.user_id == user_id, TimeLog.end_time.is_(None))
    if task_id is not None:
        query = query.filter(TimeLog.task_id == task_id)
    return query.order_by(TimeLog.start_time.desc()).first()


def _close(time_log: TimeLog) -> None:
    now = datetime.utcnow()
    elapsed = now - as_naive_utc(time_log.start_time)
    time_log.end_time = now
    time_log.duration_seconds = max(0, int(elapsed.total_seconds()))


def _load_task_for_member(db: Session, task_id: int, caller: CallerIdentity) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    require_any_membership(db, task.project_id, caller.id)
    return task


def start_timer(db: Session, task_id: int, caller: CallerIdentity) -> StartResult:
    with unit_of_work(db):
        task = _load_task_for_member(db, task_id, caller)

        auto_stopped = None
        running = _running_timer(db, caller.id)
        if running is not None:
            _close(running)
            auto_stopped = running.task_id

        time_log = TimeLog(user_id=caller.id, task_id=task.id, start_time=datetime.utcnow())
        db.add(time_log)

    db.refresh(time_log)
    logger.info(
        "timer started",
        extra={"task_id": task.id, "user_id": caller.id, "auto_stopped": auto_stopped},
    )
    return StartResult(time_log=time_log, auto_stopped_task_id=auto_stopped)


def stop_timer(db: Session, caller: CallerIdentity, task_id: Optional[int] = None) -> TimeLog:
    """Stop the caller's running timer, optionally only if it runs on ``task_id``."""
    running = _running_timer(db, caller.id, task_id)
    if running is None:
        raise NotFound("No active timer found")

    _close(running)
    db.commit()
    db.refresh(running)
    logger.info(
        "timer stopped",
        extra={"task_id": running.task_id, "user_id": caller.id, "duration_seconds": running.duration_seconds},
    )
    return running


def active_timer(db: Session, caller: CallerIdentity) -> Optional[TimeLog]:
    return _running_timer(db, caller.id)


def task_logs(db: Session, task_id: int, caller: CallerIdentity) -> Tuple[List[TimeLog], int]:
    """All logs of a task, newest first, with the total of the finished ones."""
    task = _load_task_for_member(db, task_id, caller)

    logs = (
        db.query(TimeLog)
        .filter(TimeLog.task_id == task.id)
        .order_by(TimeLog.start_time.desc(), TimeLog.id.desc())
        .all()
    )
    total = (
        db.query(func.coalesce(func.sum(TimeLog.duration_seconds), 0))
        .filter(TimeLog.task_id == task.id, TimeLog.duration_seconds.isnot(None))
        .scalar()
    )
    return logs, int(total)


def my_logs(
    db: Session,
    caller: CallerIdentity,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = MY_LOGS_LIMIT,
) -> List[TimeLog]:
    query = db.query(TimeLog).filter(TimeLog.user_id == caller.id)
    if start_date is not None:
        query = query.filter(TimeLog.start_time >= as_naive_utc(start_date))
    if end_date is not None:
        query = query.filter(TimeLog.start_time <= as_naive_utc(end_date))
    return query.order_by(TimeLog.start_time.desc(), TimeLog.id.desc()).limit(limit).all()


def serialize(time_log: TimeLog) -> TimeLogResponse:
    response = TimeLogResponse.model_validate(time_log)
    if time_log.task is not None:
        response.task_title = time_log.task.title_display
        response.project_id = time_log.task.project_id
    if time_log.user is not None:
        response.full_name = time_log.user.full_name
        response.avatar_url = time_log.user.avatar_url
    return response
