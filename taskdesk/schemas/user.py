# taskdesk/schemas/user.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taskdesk.models.user import Role


class AuthRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = ""
    password: str = ""
    is_login: bool = Field(default=False, alias="isLogin")
    role: Optional[Role] = None
    supervisor_id: Optional[str] = Field(default=None, alias="supervisorId")


class UserOut(BaseModel):
    id: str
    username: str
    role: str
    supervisor_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SupervisorOption(BaseModel):
    id: str
    username: str


class SupervisedUser(BaseModel):
    id: str
    username: str
    role: str


class DirectoryUser(BaseModel):
    id: str
    username: str
    role: str
    supervisor_id: Optional[str] = None


class SupervisorList(BaseModel):
    supervisors: List[SupervisorOption]


class UserUpdate(BaseModel):
    """Role and supervisor changes; ``supervisorId`` of "" or null clears the supervisor"""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")
    target_user_id: Optional[str] = Field(default=None, alias="targetUserId")
    role: Optional[Role] = None
    supervisor_id: Optional[str] = Field(default=None, alias="supervisorId")


class UserEnvelope(BaseModel):
    user: DirectoryUser
