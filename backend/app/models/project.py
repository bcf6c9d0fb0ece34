"""
프로젝트 + 프로젝트-앱 연결 모델
"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from app.db.base import Base, generate_id, utcnow

PROJECT_STATUSES = ("draft", "active", "archived")


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("projects_status_idx", "status"),
        Index("projects_name_idx", "name"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="draft", server_default="draft")  # draft | active | archived
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="projects")


class ProjectApp(Base):
    """프로젝트 <-> 앱 다대다 연결 (쌍은 유일)"""
    __tablename__ = "project_apps"
    __table_args__ = (
        UniqueConstraint("project_id", "app_id", name="project_apps_project_app_idx"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    app_id = Column(String(36), ForeignKey("apps.id", ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(DateTime(timezone=True), default=utcnow)
