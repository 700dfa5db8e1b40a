"""Schemas for invite links"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InviteTokenResponse(BaseModel):
    token: str
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InviteDetailsResponse(BaseModel):
    project_id: int
    project_name: str
    project_description: Optional[str]
    invited_by: str


class JoinRequest(BaseModel):
    token: str = Field(..., min_length=1)


class JoinResponse(BaseModel):
    project_id: int
