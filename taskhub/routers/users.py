from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..errors import DuplicateEmailError
from ..repositories import UserRepository

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


@router.post("", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: schemas.UserCreate,
    users: UserRepository = Depends(get_user_repository),
):
    try:
        return users.create_user(user_in.name, user_in.email)
    except DuplicateEmailError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )


@router.get("", response_model=List[schemas.UserOut])
def list_users(users: UserRepository = Depends(get_user_repository)):
    return users.list_users()


@router.get("/{user_id}", response_model=schemas.UserOut)
def get_user(user_id: int, users: UserRepository = Depends(get_user_repository)):
    user = users.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.delete("/{user_id}", response_model=schemas.MessageResponse)
def delete_user(user_id: int, users: UserRepository = Depends(get_user_repository)):
    """Delete a user together with all of their tasks."""
    if not users.delete_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"message": "User deleted successfully"}
