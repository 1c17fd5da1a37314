"""Schemas for projects"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    title_uz: Optional[str] = None
    title_jp: Optional[str] = None
    title_en: Optional[str] = None
    desc_uz: Optional[str] = None
    desc_jp: Optional[str] = None
    desc_en: Optional[str] = None
    category: str = Field(..., min_length=1)
    color_code: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    is_public: bool = False


class ProjectArchiveUpdate(BaseModel):
    is_archived: bool


class ProjectResponse(BaseModel):
    id: int
    owner_id: int
    title_uz: Optional[str]
    title_jp: Optional[str]
    title_en: Optional[str]
    desc_uz: Optional[str]
    desc_jp: Optional[str]
    desc_en: Optional[str]
    title_display: str
    category: str
    color_code: Optional[str]
    is_public: bool
    is_archived: bool
    is_starred: bool
    created_at: datetime
    updated_at: datetime
    role: Optional[str] = None

    class Config:
        from_attributes = True


class ProjectListItem(ProjectResponse):
    total_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0


class ProjectEnvelope(BaseModel):
    project: ProjectResponse
    message: Optional[str] = None


class ProjectsEnvelope(BaseModel):
    projects: List[ProjectListItem]


class ProjectStarEnvelope(BaseModel):
    project: ProjectResponse
    is_starred: bool
