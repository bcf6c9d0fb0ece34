"""
테스트 공통 설정 및 Fixtures
"""
import os

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# 환경변수 먼저 설정 (settings import 전)
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("RATE_LIMIT_AUTH_REQUESTS", "1000")

from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys
from app.models.user import User
from app.models.app import App
import app.models.project  # noqa: F401
import app.models.mcp_server  # noqa: F401
import app.models.user_secret  # noqa: F401
from app.core.security import get_password_hash


# ============================================================
# 데이터베이스 Fixtures
# ============================================================

@pytest.fixture
async def test_engine():
    """테스트마다 새로 만드는 인메모리 SQLite 엔진 (FK 제약 활성화)"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """테스트별 DB 세션"""
    async_session = sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


async def _create_user(db: AsyncSession, email: str, name: str) -> User:
    user = User(
        email=email,
        name=name,
        hashed_password=get_password_hash("TestPass1"),
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session):
    """요청자 (authenticated_client의 사용자)"""
    return await _create_user(db_session, "test@example.com", "테스트유저")


@pytest.fixture
async def other_user(db_session):
    """소유권 검사용 다른 사용자"""
    return await _create_user(db_session, "other@example.com", "다른유저")


@pytest.fixture
def make_app(db_session):
    """앱 행 생성 헬퍼 (이 서비스에는 앱 생성 API가 없음)"""

    async def _make(user: User, title: str = "테스트 앱") -> App:
        app_row = App(user_id=user.id, title=title)
        db_session.add(app_row)
        await db_session.commit()
        await db_session.refresh(app_row)
        return app_row

    return _make


# ============================================================
# FastAPI 테스트 클라이언트
# ============================================================

@pytest.fixture
async def async_client(db_session):
    """FastAPI 비동기 테스트 클라이언트 (인증 없음)"""
    from httpx import AsyncClient, ASGITransport
    from app.main import app
    from app.db.session import get_db

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(db_session, test_user):
    """test_user로 인증된 테스트 클라이언트"""
    from httpx import AsyncClient, ASGITransport
    from app.main import app
    from app.db.session import get_db
    from app.api.deps import get_current_user

    async def override_get_db():
        yield db_session

    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data():
    """회원가입 요청 데이터"""
    return {
        "email": "new@example.com",
        "password": "TestPass123",
        "name": "새유저",
    }
