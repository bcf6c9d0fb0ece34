"""
문서 첨부 API
- 채팅 메시지에 첨부할 파일을 받아 텍스트를 추출해 돌려줍니다 (저장하지 않음)
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api.deps import get_current_user
from app.core.config import settings
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.document import DocumentAttachment, DocumentListData
from app.services.document_attachment import (
    DocumentExtractionError,
    build_attachment,
    resolve_mime_type,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _too_large(filename: str) -> HTTPException:
    return HTTPException(
        status_code=413,
        detail=f"파일이 너무 큽니다 ({filename}). 최대 {settings.MAX_DOCUMENT_SIZE_MB}MB까지 가능합니다.",
    )


@router.post("", response_model=ApiResponse[DocumentListData])
async def process_documents(
    files: List[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
):
    """
    첨부 문서 처리
    - 한 번에 최대 MAX_DOCUMENTS_PER_MESSAGE개
    - 파일당 최대 MAX_DOCUMENT_SIZE_MB (초과 시 413)
    - 지원하지 않는 형식은 400, 추출 실패는 422
    - 하나라도 실패하면 전체 요청을 거부합니다
    """
    if len(files) > settings.MAX_DOCUMENTS_PER_MESSAGE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"최대 {settings.MAX_DOCUMENTS_PER_MESSAGE}개의 문서만 첨부할 수 있습니다.",
        )

    documents: List[DocumentAttachment] = []
    for upload in files:
        filename = upload.filename or "document"
        # 크기 검사가 형식 검사보다 먼저, 본문을 읽기 전에
        if upload.size is not None and upload.size > settings.max_document_size_bytes:
            raise _too_large(filename)

        mime_type = resolve_mime_type(filename, upload.content_type)
        if mime_type is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"지원하지 않는 파일 형식입니다: {filename}",
            )

        data = await upload.read()
        if len(data) > settings.max_document_size_bytes:
            raise _too_large(filename)

        try:
            documents.append(build_attachment(filename, mime_type, data, settings.MAX_DOCUMENT_CHARS))
        except DocumentExtractionError as e:
            logger.warning(f"문서 추출 실패 (user={current_user.id}, file={filename}): {e}")
            raise HTTPException(status_code=422, detail=str(e))

    return ApiResponse(data=DocumentListData(documents=documents))
