"""
Task Model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from cowork.database import Base


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    REVIEWED = "reviewed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    title_uz = Column(String(255), nullable=True)
    title_jp = Column(String(255), nullable=True)
    title_en = Column(String(255), nullable=True)
    desc_uz = Column(Text, nullable=True)
    desc_jp = Column(Text, nullable=True)
    desc_en = Column(Text, nullable=True)
    status = Column(SQLEnum(TaskStatus), default=TaskStatus.TODO, nullable=False)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.MID, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=True)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assigned_to])
    collaborators = relationship(
        "TaskCollaborator",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskCollaborator.created_at",
    )
    time_logs = relationship("TimeLog", back_populates="task", cascade="all, delete-orphan")

    @property
    def title_display(self) -> str:
        return self.title_jp or self.title_uz or self.title_en or ""
