"""
문서 첨부 스키마
"""
from typing import List
from app.schemas.common import CamelModel


class DocumentAttachment(CamelModel):
    id: str
    filename: str
    mime_type: str
    text_content: str
    size: int
    line_count: int
    truncated: bool
    extension: str


class DocumentListData(CamelModel):
    documents: List[DocumentAttachment]
