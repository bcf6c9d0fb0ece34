"""사용자 시크릿 스키마 (평문 값은 응답에 포함하지 않음)"""
from typing import List, Optional
from datetime import datetime
from pydantic import Field, field_validator

from app.schemas.common import CamelModel, not_blank


class SecretCreate(CamelModel):
    name: str = Field(..., max_length=100, description="시크릿 이름 (예: github-mcp-token)")
    value: str = Field(..., min_length=1, description="시크릿 값")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return not_blank(v, "시크릿 이름")


class SecretResponse(CamelModel):
    id: str
    name: str
    masked_value: str
    created_at: Optional[datetime] = None


class SecretData(CamelModel):
    secret: SecretResponse
    message: Optional[str] = None


class SecretListData(CamelModel):
    secrets: List[SecretResponse]
