# taskdesk/models/user.py
import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, func

from taskdesk.database import Base


class Role(str, enum.Enum):
    USER = "User"
    SUPERVISOR = "Supervisor"
    MANAGER = "Manager"


# Roles that may be chosen as somebody's supervisor
SUPERVISOR_ROLES = (Role.SUPERVISOR.value, Role.MANAGER.value)


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.USER.value)
    supervisor_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
