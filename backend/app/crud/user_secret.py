"""
사용자 시크릿 CRUD (값은 Fernet으로 암호화 저장)
"""
import logging
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import get_owned
from app.models.user_secret import UserSecret
from app.core.encryption import encrypt_value

logger = logging.getLogger(__name__)


async def list_secrets(db: AsyncSession, user_id: int) -> List[UserSecret]:
    """사용자의 모든 시크릿을 조회합니다."""
    result = await db.execute(
        select(UserSecret)
        .where(UserSecret.user_id == user_id)
        .order_by(UserSecret.created_at.desc())
    )
    return list(result.scalars().all())


async def get_secret(db: AsyncSession, user_id: int, secret_id: str) -> Optional[UserSecret]:
    return await get_owned(db, UserSecret, secret_id, user_id)


async def get_secret_by_name(db: AsyncSession, user_id: int, name: str) -> Optional[UserSecret]:
    result = await db.execute(
        select(UserSecret).where(UserSecret.user_id == user_id, UserSecret.name == name)
    )
    return result.scalar_one_or_none()


async def create_secret(db: AsyncSession, user_id: int, name: str, value: str) -> UserSecret:
    """시크릿 값을 암호화하여 저장합니다."""
    secret = UserSecret(user_id=user_id, name=name, encrypted_value=encrypt_value(value))
    db.add(secret)
    await db.commit()
    await db.refresh(secret)
    logger.info(f"Secret stored (user={user_id}, secret={secret.id})")
    return secret


async def delete_secret(db: AsyncSession, user_id: int, secret_id: str) -> bool:
    """시크릿을 삭제합니다. 참조하던 MCP 서버의 auth_secret_id는 FK SET NULL로 비워집니다."""
    secret = await get_owned(db, UserSecret, secret_id, user_id)
    if not secret:
        return False
    await db.delete(secret)
    await db.commit()
    logger.info(f"Secret deleted (user={user_id}, secret={secret_id})")
    return True
