"""Schemas for task collaborators"""
from datetime import datetime
from typing import List

from pydantic import BaseModel

from cowork.schemas.user import UserSummary


class CollaboratorAdd(BaseModel):
    user_id: int
    auto_invite: bool = False


class CollaboratorResponse(UserSummary):
    added_at: datetime


class CollaboratorEnvelope(BaseModel):
    message: str
    collaborator: UserSummary


class CollaboratorsEnvelope(BaseModel):
    collaborators: List[CollaboratorResponse]
