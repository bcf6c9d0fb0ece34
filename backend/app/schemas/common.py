"""
공통 응답 스키마
- 성공: {"success": true, "data": {...}}
- 실패: {"success": false, "error": {"message": ..., "status": ...}}
"""
from typing import Generic, TypeVar
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """JSON 필드는 camelCase, 입력은 snake_case도 허용"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: DataT


class MessageData(CamelModel):
    message: str


class ErrorDetail(BaseModel):
    message: str
    status: int


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail


def not_blank(value: str, field_label: str) -> str:
    """앞뒤 공백을 제거하고, 비어 있으면 ValueError"""
    value = value.strip()
    if not value:
        raise ValueError(f"{field_label}은(는) 필수입니다.")
    return value
