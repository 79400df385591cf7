# taskdesk/schemas/task.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taskdesk.models.user import Role


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    role: Optional[Role] = None
    # Owner when a supervisor or manager creates a task for somebody else
    assigned_user_id: Optional[str] = Field(default=None, alias="assignedUserId")


class TaskUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    role: Optional[Role] = None
    # Omitted -> flip the current value
    completed: Optional[bool] = None


class TaskOwner(BaseModel):
    username: str
    role: str
    supervisor_id: Optional[str] = None


class TaskOut(BaseModel):
    id: str
    user_id: str
    created_by: Optional[str] = None
    title: str
    completed: bool
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    owner: Optional[TaskOwner] = None

    model_config = ConfigDict(from_attributes=True)


class TaskList(BaseModel):
    tasks: List[TaskOut]


class TaskEnvelope(BaseModel):
    task: TaskOut


class DeleteResult(BaseModel):
    success: bool
