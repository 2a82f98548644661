"""
SmartKnowledge endpoints: add, search, stats and bulk add
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from smartdoc.api.deps import get_services
from smartdoc.config import Services
from smartdoc.models import BulkAddRequest, KnowledgeAddRequest
from smartdoc.utils import vector_store
from smartdoc.utils.rag import create_embedding, embed_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/knowledge")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _preview(text: str, length: int) -> str:
    return text[:length] + ("..." if len(text) > length else "")


def _add_item(services: Services, text: str, metadata: dict) -> str:
    settings = services.settings
    embedding = embed_document(text, services.embed_client, settings.embed_model, settings.max_chunk_size)
    return vector_store.add_knowledge(services.supabase, text, embedding, metadata)


@router.post("/add")
async def add_knowledge(request_body: KnowledgeAddRequest, services: Services = Depends(get_services)):
    """Embed a piece of text and add it to the knowledge base."""
    text = request_body.text
    if not text or not text.strip():
        raise HTTPException(status_code=400, detail="Text content is required and cannot be empty")

    logger.info(f"[KNOWLEDGE] Adding new knowledge: {text[:100]}...")

    try:
        knowledge_id = _add_item(services, text, request_body.metadata)
        return {
            "success": True,
            "message": "Knowledge added successfully",
            "data": {
                "id": knowledge_id,
                "text": _preview(text, 200),
                "metadata": request_body.metadata,
                "timestamp": _timestamp(),
            },
        }
    except Exception as e:
        logger.exception("[KNOWLEDGE] Failed to add knowledge")
        raise HTTPException(status_code=500, detail=f"Failed to add knowledge: {str(e)}")


@router.get("/search")
async def search_knowledge(
    q: str = Query("", description="Search query"),
    limit: int = Query(5, ge=1, le=50),
    services: Services = Depends(get_services),
):
    """Search the knowledge base by similarity."""
    if not q.strip():
        raise HTTPException(status_code=400, detail='Query parameter "q" is required and cannot be empty')

    logger.info(f"[KNOWLEDGE] Searching knowledge base: {q}")

    try:
        query_embedding = create_embedding(q, services.embed_client, services.settings.embed_model)
        results = vector_store.search_knowledge(services.supabase, query_embedding.embedding, limit)
        return {
            "success": True,
            "data": {
                "query": q,
                "results": [
                    {"id": item.id, "text": _preview(item.text, 300), "score": item.score, "metadata": item.metadata}
                    for item in results
                ],
                "total": len(results),
                "timestamp": _timestamp(),
            },
        }
    except Exception as e:
        logger.exception("[KNOWLEDGE] Search failed")
        raise HTTPException(status_code=500, detail=f"Failed to search knowledge: {str(e)}")


@router.get("/stats")
async def knowledge_stats(services: Services = Depends(get_services)):
    """Knowledge base statistics."""
    try:
        stats = vector_store.get_knowledge_stats(services.supabase, services.settings.embed_dimensions)
        return {"success": True, "data": {**stats.model_dump(), "timestamp": _timestamp()}}
    except Exception as e:
        logger.exception("[KNOWLEDGE] Failed to fetch stats")
        raise HTTPException(status_code=500, detail=f"Failed to fetch knowledge statistics: {str(e)}")


@router.post("/bulk-add")
async def bulk_add_knowledge(request_body: BulkAddRequest, services: Services = Depends(get_services)):
    """
    Add several knowledge items.

    Items are processed in order; a failing item is reported and does not
    stop the rest. success is True only when every item was added.
    """
    items = request_body.items
    if not items:
        raise HTTPException(status_code=400, detail="Items array is required and cannot be empty")

    logger.info(f"[KNOWLEDGE] Bulk adding {len(items)} knowledge items")

    results = []
    errors = []

    for index, item in enumerate(items):
        if not item.text or not item.text.strip():
            errors.append({"index": index, "error": "Text content is required"})
            continue

        try:
            knowledge_id = _add_item(services, item.text, item.metadata or {})
            results.append({"index": index, "id": knowledge_id, "success": True})
        except Exception as e:
            logger.warning(f"[KNOWLEDGE] Bulk item {index} failed: {e}")
            errors.append({"index": index, "error": str(e)})

    return {
        "success": len(errors) == 0,
        "message": f"Processed {len(items)} items: {len(results)} successful, {len(errors)} failed",
        "data": {
            "successful": results,
            "failed": errors,
            "total": len(items),
            "timestamp": _timestamp(),
        },
    }
