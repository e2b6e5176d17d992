from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from taskvault.models._columns import NAME_LENGTH
from taskvault.schemas.task import TaskOut


class BackupCreate(BaseModel):
    backup_name: str = Field(max_length=NAME_LENGTH)


class BackupOut(BaseModel):
    # field order is the export document's key order
    id: str
    user_id: str
    backup_name: str
    tasks_data: list[TaskOut]
    settings_data: dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
