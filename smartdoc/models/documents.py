"""
Document Models

Request/response models for the SmartDoc document endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DocumentMetadata(BaseModel):
    upload_date: str
    file_size: int = Field(ge=0)
    mime_type: Optional[str] = None
    chunk_count: int = Field(1, ge=1)


class DocumentRecord(BaseModel):
    """A stored document as returned by the listing endpoint (no vector)."""

    id: str
    filename: str
    content_length: int = Field(ge=0)
    metadata: dict = Field(default_factory=dict)
    created_at: Optional[str] = None


class UploadResponse(BaseModel):
    success: bool = True
    document_id: str
    filename: str
    content_length: int
    chunk_count: int
    message: str = "Document processed and indexed successfully"


class SearchRequest(BaseModel):
    query: Optional[str] = None
    limit: int = Field(5, ge=1, le=50)


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    results: list[dict]
    ai_response: str
    timestamp: str


class DocumentAnalysis(BaseModel):
    """Topics and entities extracted from a document by the analysis model."""

    topics: list = Field(default_factory=list)
    entities: list | dict = Field(default_factory=list)
    themes: list = Field(default_factory=list)
    category: str = "unknown"


class AnalyzeRequest(BaseModel):
    text: Optional[str] = None
    summary_length: int = Field(200, ge=10, le=2000)


class AnalyzeResponse(BaseModel):
    success: bool = True
    analysis: DocumentAnalysis
    analysis_parsed: bool
    summary: str
    timestamp: str


class DocumentAnalytics(BaseModel):
    total_documents: int = 0
    total_characters: int = 0
    average_characters: float = 0.0
    documents_by_type: dict[str, int] = Field(default_factory=dict)
    latest_upload: Optional[str] = None
