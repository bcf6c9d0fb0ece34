"""
MCP 서버 CRUD
- 설정 생성/조회/수정/삭제 (소유권 검사)
- 활성화 토글
- 연결 상태 기록 (연결 테스트 전용)
"""
import logging
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import get_owned, apply_patch
from app.db.base import utcnow
from app.models.mcp_server import McpServer

logger = logging.getLogger(__name__)

# 사용자가 수정할 수 있는 필드 (status/last_checked/last_error 제외)
_EDITABLE_FIELDS = ("name", "url", "transport", "auth_type", "auth_secret_id", "description", "enabled")


async def create_server(db: AsyncSession, user_id: int, data: dict) -> McpServer:
    """MCP 서버 설정을 생성합니다. 연결 상태는 unknown으로 시작합니다."""
    now = utcnow()
    enabled = data.get("enabled")
    srv = McpServer(
        user_id=user_id,
        name=data["name"],
        url=data["url"],
        transport=data.get("transport") or "http",
        auth_type=data.get("auth_type") or "none",
        auth_secret_id=data.get("auth_secret_id"),
        description=data.get("description"),
        enabled=True if enabled is None else enabled,
        status="unknown",
        last_checked=None,
        last_error=None,
        created_at=now,
        updated_at=now,
    )
    db.add(srv)
    await db.commit()
    await db.refresh(srv)
    logger.info(f"MCP server created (user={user_id}, server={srv.id})")
    return srv


async def list_servers(db: AsyncSession, user_id: int) -> List[McpServer]:
    result = await db.execute(
        select(McpServer)
        .where(McpServer.user_id == user_id)
        .order_by(McpServer.created_at.desc())
    )
    return list(result.scalars().all())


async def list_enabled_servers(db: AsyncSession, user_id: int) -> List[McpServer]:
    """활성화된 서버만 반환합니다 (도구 호출 디스패처용)."""
    result = await db.execute(
        select(McpServer)
        .where(McpServer.user_id == user_id, McpServer.enabled.is_(True))
        .order_by(McpServer.created_at.desc())
    )
    return list(result.scalars().all())


async def get_server(db: AsyncSession, user_id: int, server_id: str) -> Optional[McpServer]:
    return await get_owned(db, McpServer, server_id, user_id)


async def update_server(db: AsyncSession, user_id: int, server_id: str,
                        updates: dict) -> Optional[McpServer]:
    """설정 필드만 부분 업데이트합니다. 연결 상태 필드는 건드리지 않습니다."""
    srv = await get_owned(db, McpServer, server_id, user_id)
    if not srv:
        return None
    apply_patch(srv, updates, _EDITABLE_FIELDS)
    srv.updated_at = utcnow()
    await db.commit()
    await db.refresh(srv)
    logger.info(f"MCP server updated (user={user_id}, server={server_id})")
    return srv


async def delete_server(db: AsyncSession, user_id: int, server_id: str) -> bool:
    srv = await get_owned(db, McpServer, server_id, user_id)
    if not srv:
        return False
    await db.delete(srv)
    await db.commit()
    logger.info(f"MCP server deleted (user={user_id}, server={server_id})")
    return True


async def toggle_server(db: AsyncSession, user_id: int, server_id: str) -> Optional[McpServer]:
    """enabled 값을 반전합니다."""
    srv = await get_owned(db, McpServer, server_id, user_id)
    if not srv:
        return None
    srv.enabled = not srv.enabled
    srv.updated_at = utcnow()
    await db.commit()
    await db.refresh(srv)
    logger.info(f"MCP server toggled (user={user_id}, server={server_id}, enabled={srv.enabled})")
    return srv


async def update_server_status(db: AsyncSession, user_id: int, server_id: str, status: str,
                               error: Optional[str] = None) -> Optional[McpServer]:
    """연결 테스트 결과를 기록합니다 (status, last_checked=now, last_error)."""
    srv = await get_owned(db, McpServer, server_id, user_id)
    if not srv:
        return None
    now = utcnow()
    srv.status = status
    srv.last_checked = now
    srv.last_error = error
    srv.updated_at = now
    await db.commit()
    await db.refresh(srv)
    return srv
