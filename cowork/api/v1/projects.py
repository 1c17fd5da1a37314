"""Project endpoints"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, status
from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session

from cowork.database import get_db, unit_of_work
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.errors import NotFound
from cowork.models import MemberRole, MembershipStatus, Project, ProjectMember, Task, TaskStatus
from cowork.schemas import (
    MessageResponse,
    ProjectArchiveUpdate,
    ProjectCreate,
    ProjectEnvelope,
    ProjectListItem,
    ProjectResponse,
    ProjectsEnvelope,
    ProjectStarEnvelope,
)
from cowork.services.access import (
    find_membership,
    has_access,
    load_project,
    require_any_membership,
    require_role,
)

router = APIRouter()
logger = logging.getLogger(__name__)

MANAGER_ROLES = (MemberRole.OWNER, MemberRole.ADMIN)


def _serialize_project(project: Project, role: Optional[MemberRole]) -> ProjectResponse:
    response = ProjectResponse.model_validate(project)
    response.role = role.value if role is not None else None
    return response


def _accessible_projects(db: Session, caller: CallerIdentity, archived: bool):
    return (
        db.query(Project, ProjectMember.role)
        .outerjoin(
            ProjectMember,
            and_(ProjectMember.project_id == Project.id, ProjectMember.user_id == caller.id),
        )
        .filter(
            or_(Project.owner_id == caller.id, ProjectMember.status == MembershipStatus.ACTIVE),
            Project.is_archived.is_(archived),
        )
    )


def _task_stats(db: Session, project_ids: List[int]) -> Dict[int, Tuple[int, int, int]]:
    if not project_ids:
        return {}
    now = datetime.utcnow()
    completed = func.sum(case((Task.status == TaskStatus.DONE, 1), else_=0))
    overdue = func.sum(
        case(
            (and_(Task.status != TaskStatus.DONE, Task.deadline.isnot(None), Task.deadline < now), 1),
            else_=0,
        )
    )
    rows = (
        db.query(Task.project_id, func.count(Task.id), completed, overdue)
        .filter(Task.project_id.in_(project_ids))
        .group_by(Task.project_id)
        .all()
    )
    return {project_id: (total, done or 0, late or 0) for project_id, total, done, late in rows}


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Create a project and enrol its owner in one transaction."""
    with unit_of_work(db):
        project = Project(owner_id=caller.id, **project_in.model_dump())
        db.add(project)
        db.flush()
        db.add(
            ProjectMember(
                project_id=project.id,
                user_id=caller.id,
                role=MemberRole.ADMIN,
                status=MembershipStatus.ACTIVE,
                joined_at=datetime.utcnow(),
            )
        )

    db.refresh(project)
    logger.info("project created", extra={"project_id": project.id, "owner_id": caller.id})
    return ProjectEnvelope(
        project=_serialize_project(project, MemberRole.ADMIN),
        message="Project created successfully",
    )


@router.get("", response_model=ProjectsEnvelope)
def list_projects(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    rows = (
        _accessible_projects(db, caller, archived=False)
        .order_by(Project.is_starred.desc(), Project.created_at.desc(), Project.id.desc())
        .all()
    )
    stats = _task_stats(db, [project.id for project, _ in rows])

    projects = []
    for project, role in rows:
        total, completed, overdue = stats.get(project.id, (0, 0, 0))
        item = ProjectListItem.model_validate(project)
        item.role = role.value if role is not None else None
        item.total_tasks = total
        item.completed_tasks = completed
        item.overdue_tasks = overdue
        projects.append(item)
    return ProjectsEnvelope(projects=projects)


@router.get("/archived", response_model=ProjectsEnvelope)
def list_archived_projects(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    rows = _accessible_projects(db, caller, archived=True).order_by(Project.updated_at.desc()).all()
    projects = []
    for project, role in rows:
        item = ProjectListItem.model_validate(project)
        item.role = role.value if role is not None else None
        projects.append(item)
    return ProjectsEnvelope(projects=projects)


@router.get("/{project_id}", response_model=ProjectEnvelope)
def get_project(
    project_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    project = db.get(Project, project_id)
    # Projects the caller cannot see look exactly like missing ones.
    if project is None or not has_access(db, project, caller.id):
        raise NotFound("Project not found or access denied")

    membership = find_membership(db, project.id, caller.id)
    return ProjectEnvelope(project=_serialize_project(project, membership.role if membership else None))


@router.put("/{project_id}/archive", response_model=ProjectEnvelope)
def set_project_archived(
    project_id: int,
    archive_in: ProjectArchiveUpdate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    project = load_project(db, project_id)
    require_role(db, project, caller.id, MANAGER_ROLES, "Only owner or admin can archive projects")

    project.is_archived = archive_in.is_archived
    db.commit()
    db.refresh(project)

    action = "archived" if archive_in.is_archived else "unarchived"
    membership = find_membership(db, project.id, caller.id)
    return ProjectEnvelope(
        project=_serialize_project(project, membership.role if membership else None),
        message=f"Project {action} successfully",
    )


@router.put("/{project_id}/star", response_model=ProjectStarEnvelope)
def toggle_project_star(
    project_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    project = load_project(db, project_id)
    membership = require_any_membership(db, project.id, caller.id, "Access denied")

    project.is_starred = not project.is_starred
    db.commit()
    db.refresh(project)
    return ProjectStarEnvelope(
        project=_serialize_project(project, membership.role),
        is_starred=project.is_starred,
    )


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    project = load_project(db, project_id)
    require_role(db, project, caller.id, MANAGER_ROLES, "Only owner or admin can delete projects")

    db.delete(project)
    db.commit()
    logger.info("project deleted", extra={"project_id": project_id, "user_id": caller.id})
    return MessageResponse(message="Project deleted permanently")
