from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from app.db.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships (로드되지 않은 자식은 DB FK ON DELETE CASCADE가 정리)
    projects = relationship("Project", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    apps = relationship("App", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    mcp_servers = relationship("McpServer", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    secrets = relationship("UserSecret", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
