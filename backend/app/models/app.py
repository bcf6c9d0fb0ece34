"""
앱 모델 (프로젝트에 연결되는 대상, 이 서비스에서는 조회만 합니다)
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base, generate_id, utcnow


class App(Base):
    __tablename__ = "apps"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="apps")
