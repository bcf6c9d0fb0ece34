"""
MCP 서버 Pydantic 스키마
status / last_checked / last_error는 응답 전용입니다 (연결 테스트만 기록).
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import Field, field_validator

from app.schemas.common import CamelModel, not_blank

McpTransport = Literal["http", "sse", "stdio"]
McpAuthType = Literal["none", "bearer", "api-key"]
McpStatus = Literal["connected", "disconnected", "error", "unknown"]


class McpServerCreate(CamelModel):
    name: str = Field(..., max_length=200)
    url: str = Field(..., max_length=500)
    transport: Optional[McpTransport] = None
    auth_type: Optional[McpAuthType] = None
    auth_secret_id: Optional[str] = None
    description: Optional[str] = Field(None, max_length=5000)
    enabled: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return not_blank(v, "서버 이름")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return not_blank(v, "서버 URL")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class McpServerUpdate(CamelModel):
    """부분 업데이트: auth_secret_id / description은 null로 비울 수 있습니다."""
    name: Optional[str] = Field(None, max_length=200)
    url: Optional[str] = Field(None, max_length=500)
    transport: Optional[McpTransport] = None
    auth_type: Optional[McpAuthType] = None
    auth_secret_id: Optional[str] = None
    description: Optional[str] = Field(None, max_length=5000)
    enabled: Optional[bool] = None

    @field_validator("name", "url")
    @classmethod
    def validate_required_text(cls, v: Optional[str], info) -> str:
        if v is None:
            raise ValueError(f"{info.field_name}은(는) null일 수 없습니다.")
        return not_blank(v, info.field_name)

    @field_validator("transport", "auth_type", "enabled")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name}은(는) null일 수 없습니다.")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class McpServerResponse(CamelModel):
    id: str
    user_id: int
    name: str
    url: str
    transport: McpTransport
    auth_type: McpAuthType
    auth_secret_id: Optional[str] = None
    enabled: bool
    status: McpStatus
    last_checked: Optional[datetime] = None
    last_error: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class McpServerData(CamelModel):
    server: McpServerResponse
    message: Optional[str] = None


class McpServerListData(CamelModel):
    servers: List[McpServerResponse]


class McpServerTestData(CamelModel):
    success: bool
    status: Literal["connected", "disconnected", "error"]
    message: str
    latency_ms: Optional[int] = None
