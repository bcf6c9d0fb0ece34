from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base, generate_id, utcnow


class UserSecret(Base):
    """암호화 저장된 사용자 시크릿 (MCP 서버 인증 값)"""
    __tablename__ = "user_secrets"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    encrypted_value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_user_secret_name"),
    )

    user = relationship("User", back_populates="secrets")
    mcp_servers = relationship("McpServer", back_populates="auth_secret", passive_deletes=True)
