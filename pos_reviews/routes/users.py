"""
API routes for users.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_reviews.database import get_db, User
from pos_reviews.models import CreateUserRequest, UserResponse
from pos_reviews.stores import SqlUserStore


router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/", response_model=UserResponse, status_code=201)
def create_user(
    request: CreateUserRequest,
    db: Session = Depends(get_db)
) -> UserResponse:
    """Register a user. Login names are unique."""
    user = SqlUserStore(db).add(User(login_name=request.login_name))
    return UserResponse.model_validate(user)


@router.get("/", response_model=List[UserResponse])
def get_all_users(db: Session = Depends(get_db)) -> List[UserResponse]:
    """Get all users."""
    return [UserResponse.model_validate(u) for u in SqlUserStore(db).find_all()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)) -> UserResponse:
    """Get a single user."""
    return UserResponse.model_validate(SqlUserStore(db).get_by_id(user_id))
