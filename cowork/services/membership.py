"""
Project membership and invitation lifecycle.

A ``ProjectMember`` row doubles as the invitation: ``invite`` creates it in
``pending``, ``accept`` moves it to ``active`` and ``decline`` to ``declined``.
Re-inviting a row that is not active resets it to ``pending``.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session, aliased

from cowork.dependencies import CallerIdentity
from cowork.errors import Conflict, NotFound
from cowork.models import STATUS_RANK, MemberRole, MembershipStatus, Project, ProjectMember, User
from cowork.schemas import MyInvitationResponse, ProjectMemberResponse
from cowork.services.access import find_membership, load_project, require_access, require_role

logger = logging.getLogger(__name__)

INVITER_ROLES = (MemberRole.OWNER, MemberRole.ADMIN)


@dataclass
class InviteResult:
    membership: ProjectMember
    created: bool


def invite(
    db: Session,
    project_id: int,
    caller: CallerIdentity,
    email: str,
    role: MemberRole = MemberRole.MEMBER,
) -> InviteResult:
    """Invite a registered user to a project, or refresh a pending/declined invitation."""
    project = load_project(db, project_id)
    require_role(db, project, caller.id, INVITER_ROLES, "Only owners and admins can invite members")

    target = db.query(User).filter(User.email == email).first()
    if target is None:
        raise NotFound("User not found")

    existing = find_membership(db, project.id, target.id)
    if existing is not None:
        if existing.status == MembershipStatus.ACTIVE:
            raise Conflict("User is already a member")

        existing.role = role
        existing.status = MembershipStatus.PENDING
        existing.invited_at = datetime.utcnow()
        db.commit()
        db.refresh(existing)
        logger.info(
            "invitation resent",
            extra={"project_id": project.id, "user_id": target.id, "invite_id": existing.id},
        )
        return InviteResult(membership=existing, created=False)

    membership = ProjectMember(
        project_id=project.id,
        user_id=target.id,
        role=role,
        status=MembershipStatus.PENDING,
        invited_at=datetime.utcnow(),
    )
    db.add(membership)
    db.commit()
    db.refresh(membership)
    # TODO: notify the invitee once an email/in-app notification channel exists
    logger.info(
        "invitation created",
        extra={"project_id": project.id, "user_id": target.id, "invite_id": membership.id},
    )
    return InviteResult(membership=membership, created=True)


def _load_own_invitation(db: Session, invite_id: int, caller: CallerIdentity) -> ProjectMember:
    membership = (
        db.query(ProjectMember)
        .filter(ProjectMember.id == invite_id, ProjectMember.user_id == caller.id)
        .first()
    )
    if membership is None:
        raise NotFound("Invitation not found")
    return membership


def accept(db: Session, invite_id: int, caller: CallerIdentity) -> ProjectMember:
    membership = _load_own_invitation(db, invite_id, caller)

    if membership.status == MembershipStatus.ACTIVE:
        raise Conflict("Invitation already accepted")
    if membership.status == MembershipStatus.DECLINED:
        raise Conflict("Invitation was declined")

    membership.status = MembershipStatus.ACTIVE
    membership.joined_at = datetime.utcnow()
    db.commit()
    db.refresh(membership)
    logger.info("invitation accepted", extra={"invite_id": membership.id, "user_id": caller.id})
    return membership


def decline(db: Session, invite_id: int, caller: CallerIdentity) -> ProjectMember:
    """Mark the caller's membership declined, whatever its current status."""
    membership = _load_own_invitation(db, invite_id, caller)

    membership.status = MembershipStatus.DECLINED
    db.commit()
    db.refresh(membership)
    logger.info("invitation declined", extra={"invite_id": membership.id, "user_id": caller.id})
    return membership


def list_members(db: Session, project_id: int, caller: CallerIdentity) -> List[ProjectMemberResponse]:
    """All membership rows of a project, owner first.

    Remaining rows are ordered by status rank, then most recently joined
    (never-joined last), then most recently invited.
    """
    project = load_project(db, project_id)
    require_access(db, project, caller.id)

    rows = (
        db.query(ProjectMember, User)
        .join(User, ProjectMember.user_id == User.id)
        .filter(ProjectMember.project_id == project.id)
        .all()
    )

    # Stable sorts, least significant key first.
    rows.sort(key=lambda row: row[0].invited_at, reverse=True)
    rows.sort(key=lambda row: (row[0].joined_at is not None, row[0].joined_at), reverse=True)
    rows.sort(key=lambda row: STATUS_RANK[row[0].status])
    rows.sort(key=lambda row: row[0].user_id != project.owner_id)

    return [
        ProjectMemberResponse(
            id=membership.id,
            user_id=user.id,
            full_name=user.full_name,
            email=user.email,
            avatar_url=user.avatar_url,
            role=membership.role,
            status=membership.status,
            invited_at=membership.invited_at,
            joined_at=membership.joined_at,
            is_owner=membership.user_id == project.owner_id,
        )
        for membership, user in rows
    ]


def list_my_invitations(db: Session, caller: CallerIdentity) -> List[MyInvitationResponse]:
    inviter = aliased(User)
    rows = (
        db.query(ProjectMember, Project, inviter)
        .join(Project, ProjectMember.project_id == Project.id)
        .outerjoin(inviter, Project.owner_id == inviter.id)
        .filter(
            ProjectMember.user_id == caller.id,
            ProjectMember.status == MembershipStatus.PENDING,
        )
        .order_by(ProjectMember.invited_at.desc())
        .all()
    )
    return [
        MyInvitationResponse(
            id=membership.id,
            role=membership.role,
            status=membership.status,
            invited_at=membership.invited_at,
            project_id=project.id,
            title_uz=project.title_uz,
            title_jp=project.title_jp,
            title_en=project.title_en,
            color_code=project.color_code,
            inviter_id=owner.id if owner else None,
            inviter_name=owner.full_name if owner else None,
        )
        for membership, project, owner in rows
    ]
