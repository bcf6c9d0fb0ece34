"""
Workspace Backend - FastAPI 애플리케이션
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.api import api_router
from app.api.errors import register_exception_handlers
from app.db.session import engine
from app.db.base import Base
from app.services.rate_limiter import get_rate_limiter

# 모든 모델 import (create_all에 필요)
import app.models.user  # noqa: F401
import app.models.app  # noqa: F401
import app.models.project  # noqa: F401
import app.models.user_secret  # noqa: F401
import app.models.mcp_server  # noqa: F401

# 로깅 설정
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 라이프사이클 관리"""
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")

    # 1. DB 테이블 자동 생성 (개발 환경)
    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (development mode)")

    # 2. Redis 연결 (Rate Limit)
    limiter = get_rate_limiter()
    if not await limiter.connect():
        logger.warning("Redis connection failed - using in-memory rate limit fallback")

    yield

    logger.info("Shutting down...")
    await limiter.disconnect()
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Projects / MCP servers / document attachments API",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan
)

# CORS 설정 - 환경변수에서 읽어옴
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def read_root():
    """루트 엔드포인트"""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": "1.0.0",
        "docs": "/docs" if settings.DEBUG else "disabled"
    }


@app.get("/health")
async def health_check():
    """헬스 체크 엔드포인트"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "services": {
            "redis": get_rate_limiter().is_connected,
            "database": True
        }
    }
