"""
문서 첨부 처리 서비스
- 파일 타입 판별 (MIME / 확장자)
- 텍스트 추출 (텍스트 파일 디코딩, PDF는 pypdf)
- 최대 글자 수 초과 시 잘라내기
"""
import io
import logging
import os
import uuid
from typing import Optional, Tuple

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.schemas.document import DocumentAttachment

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
TRUNCATION_MARKER = "\n\n... [Content truncated]"

SUPPORTED_DOCUMENT_MIME_TYPES = (
    "text/plain",
    "text/markdown",
    "text/csv",
    "application/json",
    PDF_MIME_TYPE,
    "text/html",
    "text/css",
    "text/javascript",
    "application/typescript",
    "text/x-python",
    "text/x-java",
    "text/x-go",
    "text/x-rust",
    "text/x-c",
    "text/x-cpp",
    "text/yaml",
    "application/xml",
)

DOCUMENT_EXTENSION_MAP = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
    ".pdf": PDF_MIME_TYPE,
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".ts": "application/typescript",
    ".tsx": "application/typescript",
    ".jsx": "text/javascript",
    ".py": "text/x-python",
    ".java": "text/x-java",
    ".go": "text/x-go",
    ".rs": "text/x-rust",
    ".c": "text/x-c",
    ".h": "text/x-c",
    ".cpp": "text/x-cpp",
    ".hpp": "text/x-cpp",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    ".xml": "application/xml",
}


class DocumentExtractionError(Exception):
    """문서 텍스트 추출 실패"""
    pass


def get_extension(filename: str) -> str:
    """파일명의 확장자 (대소문자 유지)"""
    return os.path.splitext(filename)[1]


def is_supported_document_type(mime_type: Optional[str]) -> bool:
    return mime_type in SUPPORTED_DOCUMENT_MIME_TYPES


def resolve_mime_type(filename: str, content_type: Optional[str] = None) -> Optional[str]:
    """
    지원하는 MIME 타입을 결정합니다.
    업로드 시 선언된 타입이 지원 목록에 있으면 그대로, 아니면 확장자로 추론합니다.
    """
    if content_type:
        declared = content_type.split(";")[0].strip().lower()
        if is_supported_document_type(declared):
            return declared
    return DOCUMENT_EXTENSION_MAP.get(get_extension(filename).lower())


def is_text_based_document(mime_type: str) -> bool:
    return mime_type != PDF_MIME_TYPE


def _extract_pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfReadError as e:
        raise DocumentExtractionError(f"PDF를 읽을 수 없습니다: {e}") from e
    return "\n\n".join(p.strip() for p in pages if p.strip())


def extract_text(data: bytes, mime_type: str) -> str:
    """파일 바이트에서 텍스트를 추출합니다."""
    if is_text_based_document(mime_type):
        return data.decode("utf-8", errors="replace")
    return _extract_pdf_text(data)


def truncate_text(text: str, max_chars: int) -> Tuple[str, bool]:
    """max_chars를 넘으면 잘라내고 표시 문구를 붙입니다. (텍스트, 잘림 여부)"""
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_MARKER, True


def build_attachment(filename: str, mime_type: str, data: bytes, max_chars: int) -> DocumentAttachment:
    """검증을 통과한 파일로 첨부 객체를 만듭니다."""
    text, truncated = truncate_text(extract_text(data, mime_type), max_chars)
    attachment = DocumentAttachment(
        id=f"doc-{uuid.uuid4().hex[:12]}",
        filename=filename,
        mime_type=mime_type,
        text_content=text,
        size=len(data),
        line_count=len(text.split("\n")),
        truncated=truncated,
        extension=get_extension(filename),
    )
    logger.info(
        f"Document processed: {filename} ({mime_type}, {attachment.size} bytes, "
        f"{attachment.line_count} lines, truncated={truncated})"
    )
    return attachment
