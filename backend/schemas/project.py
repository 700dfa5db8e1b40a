"""Schemas for projects"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.schemas.project_member import ProjectMemberResponse
from backend.schemas.task import TaskResponse


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class ProjectSettings(BaseModel):
    join_by_link_enabled: bool
    pdf_generation_enabled: bool

    class Config:
        from_attributes = True


class ProjectSettingsUpdate(BaseModel):
    join_by_link_enabled: Optional[bool] = None
    pdf_generation_enabled: Optional[bool] = None


class ProjectSummary(BaseModel):
    id: int
    name: str
    description: Optional[str]
    owner_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectResponse(ProjectSummary):
    updated_at: datetime
    settings: ProjectSettings
    members: List[ProjectMemberResponse]
    tasks: List[TaskResponse] = []
