"""Task and task collaborator endpoints"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from cowork.database import get_db
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.errors import CoworkError, NotFound
from cowork.models import Task, TaskCollaborator
from cowork.schemas import (
    CollaboratorAdd,
    CollaboratorEnvelope,
    CollaboratorsEnvelope,
    MessageResponse,
    TaskCreate,
    TaskEnvelope,
    TaskResponse,
    TasksEnvelope,
    TaskStatusUpdate,
    TaskUpdate,
)
from cowork.schemas.task import DATE_RANGE_MESSAGE, as_naive_utc
from cowork.services import collaborators as collaborator_service
from cowork.services.access import require_any_membership

router = APIRouter()
logger = logging.getLogger(__name__)


def _serialize_task(task: Task) -> TaskResponse:
    data = {column.name: getattr(task, column.name) for column in Task.__table__.columns}
    data["title_display"] = task.title_display
    data["collaborators"] = collaborator_service.serialize_collaborators(task.collaborators)
    return TaskResponse.model_validate(data)


def _load_task_for_member(db: Session, task_id: int, caller: CallerIdentity) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    require_any_membership(db, task.project_id, caller.id)
    return task


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    require_any_membership(db, task_in.project_id, caller.id)

    task = Task(**task_in.model_dump())
    db.add(task)
    db.commit()
    db.refresh(task)
    return TaskEnvelope(task=_serialize_task(task), message="Task created successfully")


@router.get("/project/{project_id}", response_model=TasksEnvelope)
def list_tasks(
    project_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    require_any_membership(db, project_id, caller.id)

    tasks = (
        db.query(Task)
        .options(selectinload(Task.collaborators).selectinload(TaskCollaborator.user))
        .filter(Task.project_id == project_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )
    return TasksEnvelope(tasks=[_serialize_task(task) for task in tasks])


@router.patch("/{task_id}/status", response_model=TaskEnvelope)
def update_task_status(
    task_id: int,
    status_in: TaskStatusUpdate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    task = _load_task_for_member(db, task_id, caller)
    task.status = status_in.status
    db.commit()
    db.refresh(task)
    return TaskEnvelope(task=_serialize_task(task), message="Status updated")


@router.patch("/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    task = _load_task_for_member(db, task_id, caller)

    update_data = task_update.model_dump(exclude_unset=True)
    if not update_data:
        raise CoworkError("No fields to update")

    start = as_naive_utc(update_data.get("start_date", task.start_date))
    end = as_naive_utc(update_data.get("end_date", task.end_date))
    if start and end and end < start:
        raise CoworkError(DATE_RANGE_MESSAGE)

    for field, value in update_data.items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)
    return TaskEnvelope(task=_serialize_task(task), message="Task updated")


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    task = _load_task_for_member(db, task_id, caller)
    db.delete(task)
    db.commit()
    logger.info("task deleted", extra={"task_id": task_id, "user_id": caller.id})
    return MessageResponse(message="Task deleted")


@router.get("/{task_id}/collaborators", response_model=CollaboratorsEnvelope)
def list_task_collaborators(
    task_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    return CollaboratorsEnvelope(collaborators=collaborator_service.list_collaborators(db, task_id, caller))


@router.post("/{task_id}/collaborators", response_model=CollaboratorEnvelope)
def add_task_collaborator(
    task_id: int,
    collaborator_in: CollaboratorAdd,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Add a collaborator, optionally inviting them to the project first."""
    profile = collaborator_service.add_collaborator(
        db,
        task_id,
        caller,
        collaborator_in.user_id,
        auto_invite=collaborator_in.auto_invite,
    )
    return CollaboratorEnvelope(message="Collaborator added", collaborator=profile)


@router.delete("/{task_id}/collaborators/{collaborator_id}", response_model=MessageResponse)
def remove_task_collaborator(
    task_id: int,
    collaborator_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    collaborator_service.remove_collaborator(db, task_id, collaborator_id, caller)
    return MessageResponse(message="Collaborator removed")
