from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


# ----- User Schemas -----


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)


class UserCreate(UserBase):
    """Schema used for incoming create requests."""
    pass


class UserOut(UserBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


# ----- Task Schemas -----


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    # 0 and negatives count as missing.
    user_id: int = Field(..., gt=0)


class TaskStatusUpdate(BaseModel):
    # Strict: JSON true/false only, no "true", 1 or 0.
    is_completed: StrictBool


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    is_completed: bool
    user_id: int

    model_config = ConfigDict(from_attributes=True)


# ----- Misc -----


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
