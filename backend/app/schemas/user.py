import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import CamelModel


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """비밀번호 강도 검증"""
        if not re.search(r'[A-Za-z]', v):
            raise ValueError('비밀번호에는 최소 하나의 영문자가 포함되어야 합니다.')
        if not re.search(r'\d', v):
            raise ValueError('비밀번호에는 최소 하나의 숫자가 포함되어야 합니다.')
        return v


class UserResponse(CamelModel):
    id: int
    email: EmailStr
    name: str
    is_active: bool
    created_at: Optional[datetime] = None


class UserData(CamelModel):
    user: UserResponse


class Token(BaseModel):
    """OAuth2 토큰 응답 (표준 형식이므로 envelope 없이 반환)"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
