from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings


def enable_sqlite_foreign_keys(sync_engine: Engine) -> None:
    """SQLite는 연결마다 FK 제약(ON DELETE CASCADE / SET NULL)을 켜야 합니다."""

    @event.listens_for(sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# DEBUG 모드일 때만 SQL 로깅 (프로덕션에서는 비활성화)
if _is_sqlite:
    engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    enable_sqlite_foreign_keys(engine.sync_engine)
else:
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,  # 연결 상태 확인
        pool_recycle=3600,   # 1시간마다 연결 재활용
    )

AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
