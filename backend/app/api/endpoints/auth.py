"""
인증 API 엔드포인트
- 회원가입
- 로그인
- Rate Limiting (Redis 기반)
"""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import storage_error
from app.db.session import get_db
from app.core.security import create_access_token, verify_password, get_dummy_hash
from app.schemas.common import ApiResponse
from app.schemas.user import UserCreate, UserData, UserResponse, Token
from app.crud.user import create_user, get_user_by_email
from app.core.config import settings
from app.services.rate_limiter import get_rate_limiter

logger = logging.getLogger(__name__)
router = APIRouter()

EMAIL_TAKEN = "이미 등록된 이메일입니다."


async def check_rate_limit(request: Request, max_requests: int = 10):
    """
    IP 기반 Rate Limiting (Redis 사용, 폴백: 인메모리)
    """
    client_ip = request.client.host if request.client else "unknown"

    allowed, _count, remaining = await get_rate_limiter().check(
        identifier=f"auth:{client_ip}",
        max_requests=max_requests,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS
    )

    if not allowed:
        logger.warning(f"Rate limit exceeded for IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"요청이 너무 많습니다. {remaining}초 후에 다시 시도해주세요.",
            headers={"Retry-After": str(remaining)}
        )


@router.post("/register", response_model=ApiResponse[UserData], status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    회원가입
    """
    await check_rate_limit(request, max_requests=settings.RATE_LIMIT_AUTH_REQUESTS)

    if await get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMAIL_TAKEN)

    try:
        user = await create_user(db, user_in)
    except IntegrityError:
        # 동시 가입으로 unique 제약 위반
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMAIL_TAKEN)
    except SQLAlchemyError as e:
        raise storage_error(logger, "사용자 생성", e, email=user_in.email)

    logger.info(f"새 사용자 등록: {user.email}")
    return ApiResponse(data=UserData(user=UserResponse.model_validate(user)))


@router.post("/login", response_model=Token)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    로그인 (OAuth2 Password Flow)
    """
    await check_rate_limit(request, max_requests=settings.RATE_LIMIT_AUTH_REQUESTS)

    user = await get_user_by_email(db, form_data.username)

    # 타이밍 공격 방지를 위해 사용자가 없어도 해시 검증 수행
    if user:
        password_valid = verify_password(form_data.password, user.hashed_password)
    else:
        verify_password(form_data.password, get_dummy_hash())
        password_valid = False

    if not user or not password_valid:
        logger.warning(f"로그인 실패: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="이메일 또는 비밀번호가 올바르지 않습니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="비활성화된 계정입니다."
        )

    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(user.email, expires_delta=expires)
    logger.info(f"로그인 성공: {user.email}")

    return Token(access_token=access_token, expires_in=int(expires.total_seconds()))
