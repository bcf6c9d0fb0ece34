"""
프로젝트 API 엔드포인트
- 프로젝트 CRUD (소유자만 접근)
- 프로젝트 <-> 앱 연결
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.api.errors import storage_error
from app.crud import project as crud_project
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import ApiResponse, MessageData
from app.schemas.project import (
    AppResponse,
    ProjectAppsData,
    ProjectCreate,
    ProjectData,
    ProjectListData,
    ProjectResponse,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_NOT_FOUND = "프로젝트를 찾을 수 없습니다."
PROJECT_OR_APP_NOT_FOUND = "프로젝트 또는 앱을 찾을 수 없습니다."


@router.get("", response_model=ApiResponse[ProjectListData])
async def list_projects(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """사용자의 프로젝트 목록 (앱 수 포함, 최근 수정순)"""
    try:
        rows = await crud_project.list_projects(db, current_user.id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 목록 조회", e, user=current_user.id)
    return ApiResponse(data=ProjectListData(projects=[ProjectResponse(**row) for row in rows]))


@router.post("", response_model=ApiResponse[ProjectData], status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """새 프로젝트 생성 (draft 상태, 앱 0개)"""
    try:
        project = await crud_project.create_project(db, current_user.id, body.name, body.description)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 생성", e, user=current_user.id)

    # 새 프로젝트는 연결된 앱이 없으므로 app_count는 기본값 0
    response = ProjectResponse.model_validate(project)
    return ApiResponse(data=ProjectData(project=response, message="프로젝트가 생성되었습니다."))


@router.get("/{project_id}", response_model=ApiResponse[ProjectData])
async def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        row = await crud_project.get_project(db, current_user.id, project_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 조회", e, user=current_user.id, project=project_id)
    if row is None:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return ApiResponse(data=ProjectData(project=ProjectResponse(**row)))


@router.put("/{project_id}", response_model=ApiResponse[ProjectData])
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """전달된 필드만 수정합니다. 빈 본문은 updatedAt만 갱신합니다."""
    updates = body.model_dump(exclude_unset=True)
    try:
        row = await crud_project.update_project(db, current_user.id, project_id, updates)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 수정", e, user=current_user.id, project=project_id)
    if row is None:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return ApiResponse(data=ProjectData(project=ProjectResponse(**row), message="프로젝트가 수정되었습니다."))


@router.delete("/{project_id}", response_model=ApiResponse[MessageData])
async def delete_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await crud_project.delete_project(db, current_user.id, project_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 삭제", e, user=current_user.id, project=project_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return ApiResponse(data=MessageData(message="프로젝트가 삭제되었습니다."))


# ============================================================
# 프로젝트 <-> 앱
# ============================================================

@router.get("/{project_id}/apps", response_model=ApiResponse[ProjectAppsData])
async def list_project_apps(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """프로젝트에 연결된 앱 목록 (연결 순)"""
    try:
        apps = await crud_project.list_project_apps(db, current_user.id, project_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 앱 목록 조회", e, user=current_user.id, project=project_id)
    if apps is None:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return ApiResponse(data=ProjectAppsData(apps=[AppResponse.model_validate(a) for a in apps]))


@router.post("/{project_id}/apps/{app_id}", response_model=ApiResponse[MessageData])
async def add_app_to_project(
    project_id: str,
    app_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """앱을 프로젝트에 연결합니다. 이미 연결되어 있어도 성공합니다."""
    try:
        added = await crud_project.add_app_to_project(db, current_user.id, project_id, app_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 앱 연결", e, user=current_user.id, project=project_id, app=app_id)
    if not added:
        raise HTTPException(status_code=404, detail=PROJECT_OR_APP_NOT_FOUND)
    return ApiResponse(data=MessageData(message="앱이 프로젝트에 추가되었습니다."))


@router.delete("/{project_id}/apps/{app_id}", response_model=ApiResponse[MessageData])
async def remove_app_from_project(
    project_id: str,
    app_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        removed = await crud_project.remove_app_from_project(db, current_user.id, project_id, app_id)
    except SQLAlchemyError as e:
        raise storage_error(logger, "프로젝트 앱 연결 해제", e, user=current_user.id, project=project_id, app=app_id)
    if not removed:
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return ApiResponse(data=MessageData(message="앱이 프로젝트에서 제거되었습니다."))
