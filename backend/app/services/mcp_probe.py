"""
MCP 서버 연결 테스트 (헬스 체크)
- 단발성 GET 한 번, 재시도 없음
- 결과: connected / error / disconnected
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

HEALTH_SUFFIX = "/health"


@dataclass
class ProbeResult:
    status: str  # connected | error | disconnected
    message: str
    latency_ms: int

    @property
    def success(self) -> bool:
        return self.status == "connected"

    @property
    def error(self) -> Optional[str]:
        """DB에 기록할 오류 메시지 (connected면 None)"""
        return None if self.success else self.message


def build_probe_url(url: str) -> str:
    """'/health'로 끝나면 그대로, 아니면 끝의 '/' 하나를 떼고 '/health'를 붙입니다."""
    if url.endswith(HEALTH_SUFFIX):
        return url
    if url.endswith("/"):
        url = url[:-1]
    return f"{url}{HEALTH_SUFFIX}"


async def probe_mcp_server(
    url: str,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProbeResult:
    """
    MCP 서버에 헬스 체크 GET 요청을 한 번 보냅니다.

    Args:
        url: 서버에 설정된 URL
        timeout: 요청 타임아웃 (초), 기본값은 MCP_PROBE_TIMEOUT_SECONDS
        transport: httpx 전송 계층 (테스트에서 MockTransport 주입용)

    Returns:
        ProbeResult. 네트워크 오류도 예외 대신 disconnected 결과로 반환합니다.
    """
    probe_url = build_probe_url(url)
    timeout = timeout or settings.MCP_PROBE_TIMEOUT_SECONDS
    started = time.perf_counter()

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            response = await client.get(probe_url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        latency_ms = int((time.perf_counter() - started) * 1000)
        message = str(e) or e.__class__.__name__
        logger.info(f"MCP probe failed: {probe_url} ({latency_ms}ms) - {message}")
        return ProbeResult(status="disconnected", message=message, latency_ms=latency_ms)

    latency_ms = int((time.perf_counter() - started) * 1000)
    if response.is_success:
        result = ProbeResult(
            status="connected",
            message=f"Connected successfully ({latency_ms}ms)",
            latency_ms=latency_ms,
        )
    else:
        result = ProbeResult(
            status="error",
            message=f"Server returned status {response.status_code}",
            latency_ms=latency_ms,
        )
    logger.info(f"MCP probe: {probe_url} -> {result.status} ({latency_ms}ms)")
    return result
