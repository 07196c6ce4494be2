from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..errors import ReferencedUserMissingError
from ..repositories import TaskRepository

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_task_repository(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


@router.post("", response_model=schemas.TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: schemas.TaskCreate,
    tasks: TaskRepository = Depends(get_task_repository),
):
    """Create a task for an existing user; an unknown user_id is a 404."""
    try:
        return tasks.create_task(
            title=task_in.title,
            description=task_in.description,
            user_id=task_in.user_id,
        )
    except ReferencedUserMissingError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get("/user/{user_id}", response_model=List[schemas.TaskOut])
def list_tasks_for_user(user_id: int, tasks: TaskRepository = Depends(get_task_repository)):
    return tasks.get_tasks_by_user_id(user_id)


@router.patch("/{task_id}", response_model=schemas.MessageResponse)
def update_task_status(
    task_id: int,
    status_in: schemas.TaskStatusUpdate,
    tasks: TaskRepository = Depends(get_task_repository),
):
    if not tasks.update_task_status(task_id, status_in.is_completed):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return {"message": "Task updated successfully"}


@router.delete("/{task_id}", response_model=schemas.MessageResponse)
def delete_task(task_id: int, tasks: TaskRepository = Depends(get_task_repository)):
    if not tasks.delete_task(task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return {"message": "Task deleted successfully"}
