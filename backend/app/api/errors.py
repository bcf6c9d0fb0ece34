"""
API 오류 처리
- 모든 오류를 {"success": false, "error": {"message", "status"}} 형식으로 변환
- 요청 검증 실패는 400
- 저장소 오류는 로그만 남기고 일반 메시지로 500
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "서버 내부 오류가 발생했습니다."


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message, "status": status_code}},
        headers=headers,
    )


def storage_error(log: logging.Logger, action: str, exc: Exception, **context: Any) -> HTTPException:
    """
    저장소 오류를 로그에 남기고 500 HTTPException을 만듭니다.
    구체적인 오류 내용은 응답에 포함하지 않습니다.
    """
    ctx = ", ".join(f"{k}={v}" for k, v in context.items())
    log.error(f"{action} 실패 ({ctx}): {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{action} 중 오류가 발생했습니다.",
    )


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "요청 형식이 올바르지 않습니다."
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(first.get("msg", "")).removeprefix("Value error, ")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    """envelope 형식 예외 핸들러를 등록합니다."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _format_validation_error(exc)
        logger.warning(f"Validation error: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
