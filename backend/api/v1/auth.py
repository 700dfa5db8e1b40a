"""Registration, login and profile endpoints"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import User
from backend.schemas import Token, UserCreate, UserLogin, UserResponse, UserSummary, UserUpdate
from backend.security import create_access_token
from backend.services import users as user_service

router = APIRouter()


def _token_for(user: User) -> Token:
    return Token(
        access_token=create_access_token(user.id, user.email),
        user=UserSummary.model_validate(user),
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: Session = Depends(get_db)):
    """Create an account and return an access token for it."""
    user = user_service.register_user(db, user_in.name, user_in.email, user_in.password)
    return _token_for(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, credentials.email, credentials.password)
    return _token_for(user)


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    profile: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's name and/or email. Other fields are rejected."""
    user = user_service.update_profile(db, current_user.id, profile.name, profile.email)
    return UserResponse.model_validate(user)
