"""User directory and profile endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from cowork.database import get_db
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.errors import CoworkError, NotFound
from cowork.models import ProjectMember, User
from cowork.schemas import (
    ProfileUpdate,
    UserEnvelope,
    UserResponse,
    UserSearchEnvelope,
    UserSearchResult,
    UsersEnvelope,
    UserSummary,
)

router = APIRouter()

SEARCH_LIMIT = 20


@router.get("", response_model=UsersEnvelope)
def list_users(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Everyone except the caller, for member selection."""
    users = db.query(User).filter(User.id != caller.id).order_by(User.full_name.asc()).all()
    return UsersEnvelope(users=[UserSummary.model_validate(user) for user in users])


@router.get("/search", response_model=UserSearchEnvelope)
def search_users(
    query: str = Query(""),
    project_id: Optional[int] = Query(None),
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    if len(query) < 2:
        raise CoworkError("Query must be at least 2 characters")

    pattern = f"%{query}%"
    rows = (
        db.query(User, ProjectMember.id)
        .outerjoin(
            ProjectMember,
            and_(ProjectMember.user_id == User.id, ProjectMember.project_id == project_id),
        )
        .filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
        .order_by(ProjectMember.id.is_(None), User.full_name.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    users = []
    for user, membership_id in rows:
        result = UserSearchResult.model_validate(user)
        result.is_project_member = membership_id is not None
        users.append(result)
    return UserSearchEnvelope(users=users)


@router.get("/profile", response_model=UserEnvelope)
def get_profile(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    user = db.get(User, caller.id)
    if user is None:
        raise NotFound("User not found")
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    profile_in: ProfileUpdate,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    update_data = profile_in.model_dump(exclude_unset=True)
    if not update_data:
        raise CoworkError("No fields to update")

    user = db.get(User, caller.id)
    if user is None:
        raise NotFound("User not found")

    for field, value in update_data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return UserEnvelope(user=UserResponse.model_validate(user), message="Profile updated successfully")
