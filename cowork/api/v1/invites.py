"""Endpoints for the caller's own invitations"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cowork.database import get_db
from cowork.dependencies import CallerIdentity, get_current_caller
from cowork.schemas import InvitationsEnvelope, MessageResponse
from cowork.services import membership as membership_service

router = APIRouter()


@router.get("/me", response_model=InvitationsEnvelope)
def list_my_invitations(
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    """Pending invitations addressed to the caller, newest first."""
    return InvitationsEnvelope(invitations=membership_service.list_my_invitations(db, caller))


@router.post("/{invite_id}/accept", response_model=MessageResponse)
def accept_invitation(
    invite_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    membership_service.accept(db, invite_id, caller)
    return MessageResponse(message="Invitation accepted")


@router.post("/{invite_id}/decline", response_model=MessageResponse)
def decline_invitation(
    invite_id: int,
    caller: CallerIdentity = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    membership_service.decline(db, invite_id, caller)
    return MessageResponse(message="Invitation declined")
