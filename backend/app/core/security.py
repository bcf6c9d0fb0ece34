"""
인증 보안 유틸리티
- bcrypt 비밀번호 해싱
- JWT 액세스 토큰 발급/검증
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 타이밍 공격 방지용 더미 해시 (실제 해시와 동일한 시간 소요)
_DUMMY_HASH = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.qL/Z/5p3H3KZnG"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def get_dummy_hash() -> str:
    """타이밍 공격 방지를 위한 더미 해시 반환"""
    return _DUMMY_HASH


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """subject(이메일)를 담은 서명된 JWT를 발급합니다."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "exp": expire, "iat": now}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """
    JWT를 검증하고 subject를 반환합니다.
    서명 불일치, 만료, sub 누락 시 None
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
