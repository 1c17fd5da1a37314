"""Schemas for users and authentication"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=2)
    preferred_lang: Literal["uz", "jp", "en"] = "uz"


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: int
    full_name: str
    email: str
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    preferred_lang: str
    bio: Optional[str] = None
    created_at: Optional[datetime] = None


class UserSearchResult(UserSummary):
    is_project_member: bool = False


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2)
    avatar_url: Optional[str] = None
    bio: Optional[str] = None


class UserEnvelope(BaseModel):
    user: UserResponse
    message: Optional[str] = None


class UsersEnvelope(BaseModel):
    users: List[UserSummary]


class UserSearchEnvelope(BaseModel):
    users: List[UserSearchResult]


class MessageResponse(BaseModel):
    message: str
