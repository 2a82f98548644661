"""
Pydantic Models Package

This package contains all Pydantic models for the SmartDoc platform.

Modules:
- chunk: Document chunks produced for embedding
- embeddings: Embedding vectors and supported models
- documents: Document upload, search and analytics
- knowledge: Knowledge items and index statistics
- chat: RAG chat queries, history and feedback
"""

from .chat import ChatHistoryEntry, ChatQueryRequest, ChatQueryResponse, FeedbackRequest, QueryResult, SourceReference
from .chunk import DocumentChunk
from .documents import (
    AnalyzeRequest,
    AnalyzeResponse,
    DocumentAnalysis,
    DocumentAnalytics,
    DocumentMetadata,
    DocumentRecord,
    SearchRequest,
    SearchResponse,
    UploadResponse,
)
from .embeddings import Embedding, EmbeddingModel
from .knowledge import BulkAddRequest, BulkKnowledgeItem, KnowledgeAddRequest, KnowledgeItem, KnowledgeStats

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "BulkAddRequest",
    "BulkKnowledgeItem",
    "ChatHistoryEntry",
    "ChatQueryRequest",
    "ChatQueryResponse",
    "DocumentAnalysis",
    "DocumentAnalytics",
    "DocumentChunk",
    "DocumentMetadata",
    "DocumentRecord",
    "Embedding",
    "EmbeddingModel",
    "FeedbackRequest",
    "KnowledgeAddRequest",
    "KnowledgeItem",
    "KnowledgeStats",
    "QueryResult",
    "SearchRequest",
    "SearchResponse",
    "UploadResponse",
]

__version__ = "1.0.0"
