"""
프로젝트 CRUD
- 프로젝트 생성/조회/수정/삭제 (소유권 검사)
- 프로젝트 <-> 앱 연결 관리
"""
import logging
from typing import Optional, List

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import get_owned, apply_patch
from app.db.base import utcnow
from app.models.app import App
from app.models.project import Project, ProjectApp

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "status")


def _to_dict(project: Project, app_count: int) -> dict:
    return {
        "id": project.id,
        "user_id": project.user_id,
        "name": project.name,
        "description": project.description,
        "status": project.status,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
        "app_count": app_count,
    }


async def _count_apps(db: AsyncSession, project_id: str) -> int:
    result = await db.execute(
        select(func.count(ProjectApp.id)).where(ProjectApp.project_id == project_id)
    )
    return result.scalar_one()


async def create_project(db: AsyncSession, user_id: int, name: str,
                         description: Optional[str] = None) -> Project:
    """프로젝트를 생성합니다 (status=draft)."""
    now = utcnow()
    project = Project(
        user_id=user_id,
        name=name,
        description=description,
        status="draft",
        created_at=now,
        updated_at=now,
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info(f"Project created (user={user_id}, project={project.id})")
    return project


async def list_projects(db: AsyncSession, user_id: int) -> List[dict]:
    """사용자의 프로젝트 목록을 앱 수 포함하여 반환합니다 (최근 수정순)."""
    stmt = (
        select(
            Project,
            func.count(ProjectApp.id).label("app_count")
        )
        .outerjoin(ProjectApp, ProjectApp.project_id == Project.id)
        .where(Project.user_id == user_id)
        .group_by(Project.id)
        .order_by(Project.updated_at.desc())
    )
    result = await db.execute(stmt)
    return [_to_dict(project, app_count) for project, app_count in result.all()]


async def get_project(db: AsyncSession, user_id: int, project_id: str) -> Optional[dict]:
    """소유한 프로젝트를 앱 수와 함께 반환합니다. 없거나 남의 것이면 None"""
    project = await get_owned(db, Project, project_id, user_id)
    if not project:
        return None
    return _to_dict(project, await _count_apps(db, project.id))


async def update_project(db: AsyncSession, user_id: int, project_id: str,
                         updates: dict) -> Optional[dict]:
    """
    프로젝트를 부분 업데이트합니다.
    updates에 있는 name/description/status만 반영하고 updated_at은 항상 갱신합니다.
    """
    project = await get_owned(db, Project, project_id, user_id)
    if not project:
        return None
    apply_patch(project, updates, _EDITABLE_FIELDS)
    project.updated_at = utcnow()
    await db.commit()
    await db.refresh(project)
    logger.info(f"Project updated (user={user_id}, project={project_id})")
    return _to_dict(project, await _count_apps(db, project_id))


async def delete_project(db: AsyncSession, user_id: int, project_id: str) -> bool:
    """프로젝트를 삭제합니다. 연결된 project_apps 행은 FK CASCADE로 삭제됩니다."""
    project = await get_owned(db, Project, project_id, user_id)
    if not project:
        return False
    await db.delete(project)
    await db.commit()
    logger.info(f"Project deleted (user={user_id}, project={project_id})")
    return True


# ============================================================
# 프로젝트 <-> 앱 연결
# ============================================================

async def _get_link(db: AsyncSession, project_id: str, app_id: str) -> Optional[ProjectApp]:
    result = await db.execute(
        select(ProjectApp).where(
            ProjectApp.project_id == project_id, ProjectApp.app_id == app_id
        )
    )
    return result.scalar_one_or_none()


async def add_app_to_project(db: AsyncSession, user_id: int, project_id: str, app_id: str) -> bool:
    """
    앱을 프로젝트에 연결합니다 (멱등).
    프로젝트와 앱 모두 요청자 소유여야 하며, 이미 연결되어 있으면 그대로 성공합니다.
    """
    project = await get_owned(db, Project, project_id, user_id)
    if not project:
        return False
    app = await get_owned(db, App, app_id, user_id)
    if not app:
        return False

    if await _get_link(db, project_id, app_id):
        return True

    db.add(ProjectApp(project_id=project_id, app_id=app_id, added_at=utcnow()))
    try:
        await db.commit()
    except IntegrityError:
        # 동시 요청이 먼저 연결했거나, 그 사이 부모가 삭제된 경우
        await db.rollback()
        linked = await _get_link(db, project_id, app_id) is not None
        logger.info(f"App link conflict (project={project_id}, app={app_id}, linked={linked})")
        return linked

    logger.info(f"App added to project (user={user_id}, project={project_id}, app={app_id})")
    return True


async def remove_app_from_project(db: AsyncSession, user_id: int, project_id: str, app_id: str) -> bool:
    """앱 연결을 해제합니다. 연결이 없어도 성공하며, 프로젝트가 없을 때만 False"""
    project = await get_owned(db, Project, project_id, user_id)
    if not project:
        return False
    await db.execute(
        delete(ProjectApp).where(
            ProjectApp.project_id == project_id, ProjectApp.app_id == app_id
        )
    )
    await db.commit()
    logger.info(f"App removed from project (user={user_id}, project={project_id}, app={app_id})")
    return True


async def list_project_apps(db: AsyncSession, user_id: int, project_id: str) -> Optional[List[App]]:
    """프로젝트에 연결된 앱 목록. 프로젝트가 없거나 남의 것이면 None"""
    project = await get_owned(db, Project, project_id, user_id)
    if not project:
        return None
    stmt = (
        select(App)
        .join(ProjectApp, ProjectApp.app_id == App.id)
        .where(ProjectApp.project_id == project_id)
        .order_by(ProjectApp.added_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
