"""Project membership endpoints: inviting users and listing members"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cowork.database import get_db
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.schemas import InviteCreate, InviteEnvelope, InviteResponse, MembersEnvelope
from cowork.services import membership as membership_service

router = APIRouter()


@router.post("/{project_id}/invite", response_model=InviteEnvelope, response_model_exclude_none=True)
def invite_member(
    project_id: int,
    invite_in: InviteCreate,
    response: Response,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    result = membership_service.invite(db, project_id, caller, invite_in.email, invite_in.role)
    if not result.created:
        return InviteEnvelope(message="Invitation resent", invite_id=result.membership.id)

    response.status_code = status.HTTP_201_CREATED
    return InviteEnvelope(
        message="Invitation sent",
        invite=InviteResponse.model_validate(result.membership),
    )


@router.get("/{project_id}/members", response_model=MembersEnvelope)
def list_project_members(
    project_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    return MembersEnvelope(members=membership_service.list_members(db, project_id, caller))
