"""
MCP 서버 모델
"""
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey
)
from sqlalchemy.orm import relationship
from app.db.base import Base, generate_id, utcnow

MCP_TRANSPORTS = ("http", "sse", "stdio")
MCP_AUTH_TYPES = ("none", "bearer", "api-key")
MCP_STATUSES = ("connected", "disconnected", "error", "unknown")


class McpServer(Base):
    __tablename__ = "mcp_servers"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    url = Column(String(500), nullable=False)
    transport = Column(String(20), nullable=False, default="http", server_default="http")  # http | sse | stdio
    auth_type = Column(String(20), nullable=False, default="none", server_default="none")  # none | bearer | api-key
    auth_secret_id = Column(String(36), ForeignKey("user_secrets.id", ondelete="SET NULL"), nullable=True)
    enabled = Column(Boolean, default=True, index=True)

    # 연결 테스트에서만 기록
    status = Column(String(20), nullable=False, default="unknown", server_default="unknown", index=True)
    last_checked = Column(DateTime(timezone=True), nullable=True)
    last_error = Column(Text, nullable=True)

    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="mcp_servers")
    auth_secret = relationship("UserSecret", back_populates="mcp_servers")
