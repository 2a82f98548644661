"""
Knowledge Models

Request/response models for the SmartKnowledge endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class KnowledgeAddRequest(BaseModel):
    text: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class BulkKnowledgeItem(BaseModel):
    text: Optional[str] = None
    metadata: Optional[dict] = None


class BulkAddRequest(BaseModel):
    items: Optional[list[BulkKnowledgeItem]] = None


class KnowledgeItem(BaseModel):
    """A knowledge match returned by similarity search."""

    id: str
    text: str
    score: float
    metadata: dict = Field(default_factory=dict)


class KnowledgeStats(BaseModel):
    total_vectors: int = Field(ge=0)
    dimension: int = Field(ge=1)
    index_fullness: Optional[float] = None
