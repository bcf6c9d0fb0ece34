"""
애플리케이션 설정
환경변수를 통해 설정을 관리합니다.
"""
import logging
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # ============================================================
    # 기본 설정
    # ============================================================
    PROJECT_NAME: str = "Workspace Backend"
    API_PREFIX: str = "/api"

    # 환경 설정
    DEBUG: bool = False
    ENVIRONMENT: str = Field(
        default="development",
        description="development, staging, production"
    )

    # ============================================================
    # CORS 설정
    # ============================================================
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="쉼표로 구분된 허용 Origin 목록"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS Origin 리스트 반환"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ============================================================
    # 인증 설정
    # ============================================================
    SECRET_KEY: str = Field(
        ...,
        min_length=32,
        description="JWT 서명 및 시크릿 암호화용 비밀키 (최소 32자)"
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30, ge=1, le=1440)
    ENCRYPTION_SALT: str = Field(
        default="workspace-secrets-salt",
        min_length=8,
        description="시크릿 암호화 키 파생용 PBKDF2 salt (변경 시 기존 시크릿은 복호화 불가)"
    )

    @field_validator('SECRET_KEY')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        if v == "CHANGE_THIS_TO_A_SUPER_SECRET_KEY":
            raise ValueError("SECRET_KEY를 변경해주세요. 기본값은 보안에 취약합니다.")
        if len(v) < 32:
            raise ValueError("SECRET_KEY는 최소 32자 이상이어야 합니다.")
        return v

    # ============================================================
    # Rate Limiting 설정
    # ============================================================
    RATE_LIMIT_AUTH_REQUESTS: int = Field(default=10, ge=1, description="분당 인증 요청 수")
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=60, ge=1, description="Rate Limit 윈도우 (초)")

    # ============================================================
    # 데이터베이스 설정
    # ============================================================
    DATABASE_URL: str = Field(
        ...,
        description="DB 연결 URL (postgresql+asyncpg:// 또는 sqlite+aiosqlite://)"
    )

    # Redis (Rate Limit 저장소)
    REDIS_URL: str = Field(
        default="redis://localhost:6379",
        description="Redis 연결 URL"
    )
    REDIS_PASSWORD: Optional[str] = Field(default=None, description="Redis 비밀번호 (옵션)")

    # ============================================================
    # MCP 서버 연결 테스트
    # ============================================================
    MCP_PROBE_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="MCP 헬스 체크 요청 타임아웃 (초)"
    )

    # ============================================================
    # 문서 첨부 설정
    # ============================================================
    MAX_DOCUMENT_SIZE_MB: int = Field(default=5, ge=1, le=50)
    MAX_DOCUMENTS_PER_MESSAGE: int = Field(default=3, ge=1, le=20)
    MAX_DOCUMENT_CHARS: int = Field(default=100_000, ge=1000)

    @property
    def max_document_size_bytes(self) -> int:
        """문서 최대 크기 (바이트)"""
        return self.MAX_DOCUMENT_SIZE_MB * 1024 * 1024

    # ============================================================
    # 로깅 설정
    # ============================================================
    LOG_LEVEL: str = Field(default="INFO", description="로그 레벨")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def validate_production_settings(self) -> List[str]:
        """
        프로덕션 환경 설정 검증
        Returns:
            경고 메시지 리스트
        """
        warnings = []

        if self.ENVIRONMENT == "production":
            if self.DEBUG:
                warnings.append("프로덕션 환경에서 DEBUG=True는 권장되지 않습니다.")

            if "localhost" in self.CORS_ORIGINS:
                warnings.append("프로덕션 환경에서 localhost CORS는 권장되지 않습니다.")

            if "localhost" in self.DATABASE_URL:
                warnings.append("프로덕션 환경에서 localhost DB는 권장되지 않습니다.")

            if self.DATABASE_URL.startswith("sqlite"):
                warnings.append("프로덕션 환경에서 SQLite는 권장되지 않습니다.")

            if self.ENCRYPTION_SALT == "workspace-secrets-salt":
                warnings.append("프로덕션 환경에서는 ENCRYPTION_SALT를 기본값이 아닌 값으로 설정하세요.")

        return warnings


# 설정 인스턴스 생성
settings = Settings()

# 프로덕션 환경 경고 출력
_warnings = settings.validate_production_settings()
for warning in _warnings:
    logger.warning(f"[CONFIG] {warning}")
