"""Schemas for tasks"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.models import TaskProgress
from backend.schemas.user import UserSummary


class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    deadline: datetime


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    progress: Optional[TaskProgress] = None


class TaskProgressUpdate(BaseModel):
    progress: TaskProgress


class TaskProgressEntryResponse(BaseModel):
    progress: TaskProgress
    updated_by_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str]
    deadline: datetime
    progress: TaskProgress
    creator: UserSummary
    assignee: Optional[UserSummary]
    created_at: datetime
    updated_at: datetime
    progress_history: List[TaskProgressEntryResponse] = []

    class Config:
        from_attributes = True
