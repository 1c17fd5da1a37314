"""
Project Model
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from cowork.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title_uz = Column(String(255), nullable=True)
    title_jp = Column(String(255), nullable=True)
    title_en = Column(String(255), nullable=True)
    desc_uz = Column(Text, nullable=True)
    desc_jp = Column(Text, nullable=True)
    desc_en = Column(Text, nullable=True)
    category = Column(String(100), default="General", nullable=False)
    color_code = Column(String(7), nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    is_starred = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    owner = relationship("User", back_populates="owned_projects", foreign_keys=[owner_id])
    members = relationship("ProjectMember", back_populates="project", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan")

    @property
    def title_display(self) -> str:
        return self.title_jp or self.title_uz or self.title_en or ""
