"""
Authorization capabilities for project sub-resources.

Each operation picks the check it needs explicitly:

* ``require_role`` - project owner, or an *active* membership with one of the roles.
* ``require_access`` - project owner, or any *active* membership.
* ``require_any_membership`` - a membership row in any status.
"""
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from cowork.errors import Forbidden, NotFound
from cowork.models import MemberRole, MembershipStatus, Project, ProjectMember


def load_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")
    return project


def find_membership(db: Session, project_id: int, user_id: int) -> Optional[ProjectMember]:
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )


def is_owner(project: Project, user_id: int) -> bool:
    return project.owner_id == user_id


def has_access(db: Session, project: Project, user_id: int) -> bool:
    if is_owner(project, user_id):
        return True
    membership = find_membership(db, project.id, user_id)
    return membership is not None and membership.status == MembershipStatus.ACTIVE


def require_role(
    db: Session,
    project: Project,
    user_id: int,
    roles: Iterable[MemberRole],
    message: str = "Access denied",
) -> None:
    if is_owner(project, user_id):
        return
    membership = find_membership(db, project.id, user_id)
    if (
        membership is None
        or membership.status != MembershipStatus.ACTIVE
        or membership.role not in set(roles)
    ):
        raise Forbidden(message)


def require_access(db: Session, project: Project, user_id: int, message: str = "Access denied") -> None:
    if not has_access(db, project, user_id):
        raise Forbidden(message)


def require_any_membership(
    db: Session,
    project_id: int,
    user_id: int,
    message: str = "Not a member of this project",
) -> ProjectMember:
    membership = find_membership(db, project_id, user_id)
    if membership is None:
        raise Forbidden(message)
    return membership
