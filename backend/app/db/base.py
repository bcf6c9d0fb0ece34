"""
SQLAlchemy Declarative Base
모든 모델은 이 Base를 상속합니다.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_id() -> str:
    """문자열 PK 생성 (uuid4)"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """타임존 포함 현재 UTC 시각 (마이크로초 정밀도)"""
    return datetime.now(timezone.utc)
