"""
Redis 기반 Rate Limiter
- Sliding Window (sorted set)
- Redis 미연결 시 인메모리 폴백
"""
import logging
from functools import lru_cache
from datetime import datetime
from typing import Dict, List, Optional

import redis.asyncio as redis
from redis.asyncio import ConnectionPool

from app.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """요청 빈도 제한 (싱글톤)"""

    _instance: Optional["RateLimiter"] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if RateLimiter._initialized:
            return
        RateLimiter._initialized = True

        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._connected: bool = False
        self._fallback_store: Dict[str, List[float]] = {}

    async def connect(self) -> bool:
        """Redis 연결"""
        if self._connected:
            return True

        try:
            self._pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
                max_connections=20,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            await self._client.ping()
            self._connected = True
            logger.info("Redis 연결 성공")
            return True
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Redis 연결 실패: {e}")
            self._connected = False
            return False

    async def disconnect(self):
        """Redis 연결 해제"""
        if self._client:
            await self._client.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._connected = False
        logger.info("Redis 연결 해제")

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def check(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: Optional[int] = None
    ) -> tuple[bool, int, int]:
        """
        Rate Limit 체크 (Sliding Window 알고리즘)

        Args:
            identifier: 식별자 (예: "auth:<ip>")
            max_requests: 윈도우 내 최대 요청 수
            window_seconds: 윈도우 크기 (초)

        Returns:
            (허용 여부, 현재 요청 수, 재시도까지 남은 초)
        """
        window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS

        if not self._connected:
            return self._check_in_memory(identifier, max_requests, window_seconds)

        key = f"rate_limit:{identifier}"
        now = datetime.now().timestamp()
        try:
            pipe = self._client.pipeline()
            pipe.zremrangebyscore(key, 0, now - window_seconds)
            pipe.zadd(key, {str(now): now})
            pipe.zcard(key)
            pipe.expire(key, window_seconds)
            results = await pipe.execute()
            current_count = results[2]

            if current_count > max_requests:
                oldest = await self._client.zrange(key, 0, 0, withscores=True)
                remaining = int(window_seconds - (now - oldest[0][1])) if oldest else window_seconds
                return (False, current_count, max(0, remaining))

            return (True, current_count, 0)

        except redis.RedisError as e:
            logger.error(f"Rate limit 체크 실패: {e}")
            # Redis 오류 시 허용 (fail-open)
            return (True, 0, 0)

    def _check_in_memory(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: int
    ) -> tuple[bool, int, int]:
        """Redis 연결 실패 시 인메모리 Rate Limit"""
        now = datetime.now().timestamp()
        hits = [t for t in self._fallback_store.get(identifier, []) if now - t < window_seconds]
        self._fallback_store[identifier] = hits

        if len(hits) >= max_requests:
            remaining = int(window_seconds - (now - min(hits)))
            return (False, len(hits), max(0, remaining))

        hits.append(now)
        return (True, len(hits), 0)


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    """싱글톤 RateLimiter 인스턴스 반환"""
    return RateLimiter()
