"""Version 1 of the REST API."""
from fastapi import APIRouter

from backend.api.v1 import auth, invites, members, projects, tasks

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(members.router, prefix="/projects", tags=["members"])
api_router.include_router(tasks.router, prefix="/projects", tags=["tasks"])
api_router.include_router(invites.router, tags=["invites"])
