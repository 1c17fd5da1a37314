"""Schemas for project members and invitations"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr

from cowork.models.project_member import MemberRole, MembershipStatus


class InviteCreate(BaseModel):
    email: EmailStr
    role: MemberRole = MemberRole.MEMBER


class InviteResponse(BaseModel):
    id: int
    project_id: int
    user_id: int
    role: MemberRole
    status: MembershipStatus
    invited_at: datetime

    class Config:
        from_attributes = True


class InviteEnvelope(BaseModel):
    message: str
    invite: Optional[InviteResponse] = None
    invite_id: Optional[int] = None


class ProjectMemberResponse(BaseModel):
    id: int
    user_id: int
    full_name: str
    email: str
    avatar_url: Optional[str]
    role: MemberRole
    status: MembershipStatus
    invited_at: datetime
    joined_at: Optional[datetime]
    is_owner: bool


class MembersEnvelope(BaseModel):
    members: List[ProjectMemberResponse]


class MyInvitationResponse(BaseModel):
    id: int
    role: MemberRole
    status: MembershipStatus
    invited_at: datetime
    project_id: int
    title_uz: Optional[str]
    title_jp: Optional[str]
    title_en: Optional[str]
    color_code: Optional[str]
    inviter_id: Optional[int]
    inviter_name: Optional[str]


class InvitationsEnvelope(BaseModel):
    invitations: List[MyInvitationResponse]
