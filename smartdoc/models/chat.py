from typing import Optional

from pydantic import BaseModel, Field


class ChatQueryRequest(BaseModel):
    query: Optional[str] = None
    user_id: Optional[str] = None


class SourceReference(BaseModel):
    """Knowledge item used to answer a query (text truncated for display)"""

    id: str
    text: str
    score: float
    metadata: dict = Field(default_factory=dict)


class QueryResult(BaseModel):
    response: str
    sources: list[SourceReference] = Field(default_factory=list)
    confidence: float = 0.0


class ChatQueryResponse(BaseModel):
    query_id: str
    query: str
    response: str
    sources: list[SourceReference]
    confidence: float
    timestamp: str
    user_id: Optional[str] = None


class FeedbackRequest(BaseModel):
    query_id: Optional[str] = None
    rating: Optional[int] = None
    feedback: Optional[str] = None
    user_id: Optional[str] = None


class ChatHistoryEntry(BaseModel):
    query_id: str
    query: str
    response: str
    confidence: Optional[float] = None
    created_at: Optional[str] = None
