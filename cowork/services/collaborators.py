"""
Task collaborators, including the auto-invite path.

Adding a collaborator who has no membership row in the task's project either
fails with ``RequiresInvite`` or, when ``auto_invite`` is set, creates a
pending membership in the same transaction as the collaborator link.
"""
import logging
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from cowork.database import unit_of_work
from cowork.dependencies import CallerIdentity
from cowork.errors import NotFound, RequiresInvite
from cowork.models import MemberRole, MembershipStatus, ProjectMember, Task, TaskCollaborator, User
from cowork.schemas import CollaboratorResponse, UserSummary
from cowork.services.access import find_membership, require_any_membership

logger = logging.getLogger(__name__)


def _load_task(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    return task


def _link_collaborator(db: Session, task_id: int, user_id: int) -> None:
    # Already linked is not an error.
    if db.get(TaskCollaborator, (task_id, user_id)) is not None:
        return
    db.add(TaskCollaborator(task_id=task_id, user_id=user_id, created_at=datetime.utcnow()))
    db.flush()


def add_collaborator(
    db: Session,
    task_id: int,
    caller: CallerIdentity,
    target_user_id: int,
    auto_invite: bool = False,
) -> UserSummary:
    with unit_of_work(db):
        task = _load_task(db, task_id)
        require_any_membership(db, task.project_id, caller.id)

        target = db.get(User, target_user_id)
        if target is None:
            raise NotFound("User not found")
        profile = UserSummary.model_validate(target)

        if find_membership(db, task.project_id, target.id) is None:
            if not auto_invite:
                raise RequiresInvite(profile)
            db.add(
                ProjectMember(
                    project_id=task.project_id,
                    user_id=target.id,
                    role=MemberRole.MEMBER,
                    status=MembershipStatus.PENDING,
                    invited_at=datetime.utcnow(),
                )
            )
            db.flush()
            logger.info(
                "auto-invited collaborator",
                extra={"project_id": task.project_id, "task_id": task.id, "user_id": target.id},
            )

        _link_collaborator(db, task.id, target.id)

    return profile


def remove_collaborator(db: Session, task_id: int, collaborator_id: int, caller: CallerIdentity) -> None:
    task = _load_task(db, task_id)
    require_any_membership(db, task.project_id, caller.id)

    db.query(TaskCollaborator).filter(
        TaskCollaborator.task_id == task.id,
        TaskCollaborator.user_id == collaborator_id,
    ).delete(synchronize_session=False)
    db.commit()


def serialize_collaborators(links: List[TaskCollaborator]) -> List[CollaboratorResponse]:
    return [
        CollaboratorResponse(
            id=link.user.id,
            full_name=link.user.full_name,
            email=link.user.email,
            avatar_url=link.user.avatar_url,
            added_at=link.created_at,
        )
        for link in links
    ]


def list_collaborators(db: Session, task_id: int, caller: CallerIdentity) -> List[CollaboratorResponse]:
    task = _load_task(db, task_id)
    require_any_membership(db, task.project_id, caller.id)

    links = (
        db.query(TaskCollaborator)
        .filter(TaskCollaborator.task_id == task.id)
        .order_by(TaskCollaborator.created_at.asc())
        .all()
    )
    return serialize_collaborators(links)
