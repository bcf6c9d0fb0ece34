"""
MCP 서버 API 엔드포인트
- 서버 설정 CRUD / 활성화 토글
- 연결 테스트 (헬스 체크 후 상태 기록)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.api.errors import storage_error
from app.crud import mcp_server as crud_mcp
from app.crud.user_secret import get_secret
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import ApiResponse, MessageData
from app.schemas.mcp_server import (
    McpServerCreate,
    McpServerData,
    McpServerListData,
    McpServerResponse,
    McpServerTestData,
    McpServerUpdate,
)
from app.services.mcp_probe import probe_mcp_server

logger = logging.getLogger(__name__)

router = APIRouter()

SERVER_NOT_FOUND = "MCP 서버를 찾을 수 없습니다."


async def _ensure_secret_owned(db: AsyncSession, user_id: int, secret_id: Optional[str]) -> None:
    """authSecretId가 주어졌다면 요청자 소유의 시크릿이어야 합니다."""
    if secret_id is None:
        return
    try:
        secret = await get_secret(db, user_id, secret_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "시크릿 조회", e, user=user_id, secret=secret_id)
    if secret is None:
        raise HTTPException(status_code=400, detail="authSecretId: 존재하지 않는 시크릿입니다.")


@router.get("", response_model=ApiResponse[McpServerListData])
async def list_servers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        servers = await crud_mcp.list_servers(db, current_user.id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 목록 조회", e, user=current_user.id)
    return ApiResponse(data=McpServerListData(
        servers=[McpServerResponse.model_validate(s) for s in servers]
    ))


@router.get("/enabled", response_model=ApiResponse[McpServerListData])
async def list_enabled_servers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """활성화된 서버만 반환합니다 (도구 호출 대상)."""
    try:
        servers = await crud_mcp.list_enabled_servers(db, current_user.id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "활성 MCP 서버 조회", e, user=current_user.id)
    return ApiResponse(data=McpServerListData(
        servers=[McpServerResponse.model_validate(s) for s in servers]
    ))


@router.post("", response_model=ApiResponse[McpServerData], status_code=status.HTTP_201_CREATED)
async def create_server(
    body: McpServerCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """MCP 서버 설정 추가 (연결 상태는 unknown)"""
    await _ensure_secret_owned(db, current_user.id, body.auth_secret_id)
    try:
        server = await crud_mcp.create_server(db, current_user.id, body.model_dump())
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 생성", e, user=current_user.id)
    return ApiResponse(data=McpServerData(
        server=McpServerResponse.model_validate(server),
        message="MCP 서버가 추가되었습니다.",
    ))


@router.get("/{server_id}", response_model=ApiResponse[McpServerData])
async def get_server(
    server_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        server = await crud_mcp.get_server(db, current_user.id, server_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 조회", e, user=current_user.id, server=server_id)
    if not server:
        raise HTTPException(status_code=404, detail=SERVER_NOT_FOUND)
    return ApiResponse(data=McpServerData(server=McpServerResponse.model_validate(server)))


@router.put("/{server_id}", response_model=ApiResponse[McpServerData])
async def update_server(
    server_id: str,
    body: McpServerUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """설정 부분 수정 (연결 상태 필드는 변경 불가)"""
    updates = body.model_dump(exclude_unset=True)
    if "auth_secret_id" in updates:
        await _ensure_secret_owned(db, current_user.id, updates["auth_secret_id"])
    try:
        server = await crud_mcp.update_server(db, current_user.id, server_id, updates)
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 수정", e, user=current_user.id, server=server_id)
    if not server:
        raise HTTPException(status_code=404, detail=SERVER_NOT_FOUND)
    return ApiResponse(data=McpServerData(
        server=McpServerResponse.model_validate(server),
        message="MCP 서버가 수정되었습니다.",
    ))


@router.delete("/{server_id}", response_model=ApiResponse[MessageData])
async def delete_server(
    server_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await crud_mcp.delete_server(db, current_user.id, server_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 삭제", e, user=current_user.id, server=server_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=SERVER_NOT_FOUND)
    return ApiResponse(data=MessageData(message="MCP 서버가 삭제되었습니다."))


@router.patch("/{server_id}/toggle", response_model=ApiResponse[McpServerData])
async def toggle_server(
    server_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        server = await crud_mcp.toggle_server(db, current_user.id, server_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 토글", e, user=current_user.id, server=server_id)
    if not server:
        raise HTTPException(status_code=404, detail=SERVER_NOT_FOUND)
    message = "MCP 서버가 활성화되었습니다." if server.enabled else "MCP 서버가 비활성화되었습니다."
    return ApiResponse(data=McpServerData(server=McpServerResponse.model_validate(server), message=message))


@router.post("/{server_id}/test", response_model=ApiResponse[McpServerTestData])
async def test_server_connection(
    server_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    서버 연결 테스트
    - {url}/health 로 GET 한 번 (5초 타임아웃)
    - 결과 상태와 확인 시각을 저장한 뒤 반환
    - 네트워크 실패는 500이 아니라 disconnected 결과로 응답
    """
    try:
        server = await crud_mcp.get_server(db, current_user.id, server_id)
        # 프로브 대기 중에는 트랜잭션을 열어두지 않음 (rollback은 current_user를 expire시킴)
        await db.commit()
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 조회", e, user=current_user.id, server=server_id)
    if not server:
        raise HTTPException(status_code=404, detail=SERVER_NOT_FOUND)

    result = await probe_mcp_server(server.url)

    try:
        await crud_mcp.update_server_status(db, current_user.id, server_id, result.status, result.error)
    except SQLAlchemyError as e:
        raise storage_error(logger, "MCP 서버 상태 기록", e, user=current_user.id, server=server_id)

    return ApiResponse(data=McpServerTestData(
        success=result.success,
        status=result.status,
        message=result.message,
        latency_ms=result.latency_ms,
    ))
