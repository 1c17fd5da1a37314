"""Task collaborator link between a task and a user"""
from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from cowork.database import Base


class TaskCollaborator(Base):
    __tablename__ = "task_collaborators"

    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    # Relationships
    task = relationship("Task", back_populates="collaborators")
    user = relationship("User")
