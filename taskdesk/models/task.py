# taskdesk/models/task.py
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, func

from taskdesk.database import Base
from taskdesk.models.user import new_id


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    # Set iff completed is true
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
