"""
프로젝트 Pydantic 스키마
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import Field, field_validator

from app.schemas.common import CamelModel, not_blank

ProjectStatus = Literal["draft", "active", "archived"]


class ProjectCreate(CamelModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=5000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return not_blank(v, "프로젝트 이름")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class ProjectUpdate(CamelModel):
    """부분 업데이트: 전달된 필드만 변경"""
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[ProjectStatus] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("프로젝트 이름은 null일 수 없습니다.")
        return not_blank(v, "프로젝트 이름")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("status는 null일 수 없습니다.")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class ProjectResponse(CamelModel):
    id: str
    user_id: int
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    app_count: int = 0


class AppResponse(CamelModel):
    id: str
    user_id: int
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectData(CamelModel):
    project: ProjectResponse
    message: Optional[str] = None


class ProjectListData(CamelModel):
    projects: List[ProjectResponse]


class ProjectAppsData(CamelModel):
    apps: List[AppResponse]
