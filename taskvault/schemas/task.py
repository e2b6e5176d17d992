from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taskvault.models._columns import NAME_LENGTH


class TaskBase(BaseModel):
    title: str = Field(max_length=NAME_LENGTH)
    description: str = ""
    is_urgent: bool = False


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=NAME_LENGTH)
    description: Optional[str] = None
    is_urgent: Optional[bool] = None
    is_completed: Optional[bool] = None


class TaskCompletion(BaseModel):
    is_completed: bool


class TaskOut(TaskBase):
    id: str
    user_id: str
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskCounts(BaseModel):
    active: int
    urgent: int
    completed: int
