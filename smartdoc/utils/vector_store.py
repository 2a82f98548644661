"""
Vector storage on Supabase (pgvector).

Documents and knowledge items live in their own tables; similarity search
goes through database functions that rank rows by cosine similarity.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional

from supabase import Client

from smartdoc.config import RPCFunctions, Tables
from smartdoc.models import DocumentAnalytics, DocumentRecord, KnowledgeItem, KnowledgeStats

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ===============================
# DOCUMENTS
# ===============================
def store_document(supabase: Client, filename: str, content: str, embedding: List[float], metadata: Optional[Dict] = None) -> str:
    """
    Store a document and its embedding.

    Args:
        supabase: Supabase client
        filename: Original filename
        content: Extracted document text
        embedding: Document-level embedding vector
        metadata: Upload metadata (upload_date, file_size, mime_type, chunk_count)

    Returns:
        The ID of the stored document
    """
    document_id = str(uuid.uuid4())
    result = (
        supabase.table(Tables.DOCUMENTS)
        .insert(
            {
                "id": document_id,
                "filename": filename,
                "content": content,
                "embedding": embedding,
                "metadata": metadata or {},
            }
        )
        .execute()
    )

    if not result.data:
        raise RuntimeError("Document insert returned no data.")
    return result.data[0].get("id", document_id)


def search_similar(supabase: Client, query_embedding: List[float], limit: int = 5) -> List[Dict]:
    """Search documents by embedding similarity."""
    result = supabase.rpc(RPCFunctions.MATCH_DOCUMENTS, {"query_embedding": query_embedding, "match_count": limit}).execute()

    return [
        {
            "id": row["id"],
            "filename": row.get("filename"),
            "content": row.get("content", ""),
            "similarity": row.get("similarity"),
            "metadata": row.get("metadata") or {},
        }
        for row in result.data or []
    ]


def list_documents(supabase: Client) -> List[DocumentRecord]:
    """List stored documents, newest first, without their vectors."""
    result = (
        supabase.table(Tables.DOCUMENTS)
        .select("id, filename, content, metadata, created_at")
        .order("created_at", desc=True)
        .execute()
    )

    return [
        DocumentRecord(
            id=row["id"],
            filename=row["filename"],
            content_length=len(row.get("content") or ""),
            metadata=row.get("metadata") or {},
            created_at=row.get("created_at"),
        )
        for row in result.data or []
    ]


def delete_document(supabase: Client, document_id: str) -> None:
    """
    Delete a document by ID.

    Raises:
        LookupError: If no document has this ID
    """
    result = supabase.table(Tables.DOCUMENTS).delete().eq("id", document_id).execute()
    if not result.data:
        raise LookupError(f"Document not found: {document_id}")


def get_analytics(supabase: Client) -> DocumentAnalytics:
    """Aggregate document counts and sizes."""
    result = supabase.table(Tables.DOCUMENTS).select("content, metadata, created_at").execute()
    rows = result.data or []

    if not rows:
        return DocumentAnalytics()

    lengths = [len(row.get("content") or "") for row in rows]
    by_type = Counter((row.get("metadata") or {}).get("mime_type") or "unknown" for row in rows)
    uploads = [row["created_at"] for row in rows if row.get("created_at")]

    return DocumentAnalytics(
        total_documents=len(rows),
        total_characters=sum(lengths),
        average_characters=sum(lengths) / len(rows),
        documents_by_type=dict(by_type),
        latest_upload=max(uploads) if uploads else None,
    )


# ===============================
# KNOWLEDGE
# ===============================
def add_knowledge(supabase: Client, text: str, embedding: List[float], metadata: Optional[Dict] = None) -> str:
    """Store a knowledge item. Returns its generated ID."""
    knowledge_id = str(uuid.uuid4())
    supabase.table(Tables.KNOWLEDGE).insert(
        {
            "id": knowledge_id,
            "content": text,
            "embedding": embedding,
            "metadata": {"text": text, "timestamp": _now(), **(metadata or {})},
        }
    ).execute()
    return knowledge_id


def search_knowledge(supabase: Client, query_embedding: List[float], top_k: int = 5) -> List[KnowledgeItem]:
    """Search knowledge items by embedding similarity, best match first."""
    result = supabase.rpc(RPCFunctions.MATCH_KNOWLEDGE, {"query_embedding": query_embedding, "match_count": top_k}).execute()

    matches = []
    for row in result.data or []:
        metadata = row.get("metadata") or {}
        matches.append(
            KnowledgeItem(
                id=row["id"],
                text=row.get("content") or metadata.get("text", ""),
                score=row.get("similarity") or 0.0,
                metadata=metadata,
            )
        )
    return matches


def get_knowledge_stats(supabase: Client, dimension: int) -> KnowledgeStats:
    """
    Count stored knowledge vectors.

    pgvector tables have no fixed capacity, so index_fullness is always None.
    """
    result = supabase.table(Tables.KNOWLEDGE).select("id", count="exact").limit(1).execute()
    return KnowledgeStats(total_vectors=result.count or 0, dimension=dimension, index_fullness=None)
