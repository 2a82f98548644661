"""
Document Chunk Models

Chunks produced when a document is split for embedding.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DocumentChunk(BaseModel):
    """
    A bounded-length piece of a larger document.

    Created transiently while embedding a document and discarded afterwards.
    """

    # ========================================================================
    # Content
    # ========================================================================
    content: str = Field(min_length=1, description="Text content of the chunk")

    # ========================================================================
    # Metadata
    # ========================================================================
    index: int = Field(0, ge=0, description="Position of the chunk in the source document")
    metadata: Optional[dict] = Field(None, description="Additional metadata for the chunk (source, filename, etc.)")
