"""
RAG chat endpoints: query, history, feedback and suggestions
"""

import logging
import random
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from smartdoc.api.deps import get_services
from smartdoc.config import Services
from smartdoc.models import ChatQueryRequest, ChatQueryResponse, FeedbackRequest
from smartdoc.utils.chat_memory import generate_query_id, get_history, store_exchange, store_feedback
from smartdoc.utils.rag import process_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat")

SUGGESTIONS = [
    "How do I integrate multiple knowledge bases?",
    "What are the best practices for RAG implementation?",
    "How can I improve search accuracy in my knowledge system?",
    "What are the benefits of using vector databases?",
    "How do I handle multilingual knowledge bases?",
    "What metrics should I track for knowledge retrieval?",
    "How can I optimize embedding generation?",
    "What are common challenges in knowledge management?",
]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/query", response_model=ChatQueryResponse)
async def chat_query(request_body: ChatQueryRequest, services: Services = Depends(get_services)):
    """
    Answer a query from the knowledge base.

    Process:
    1. Embed the query and search the knowledge base
    2. Generate an answer from the matches (or the "nothing found" answer)
    3. Store the exchange in the user's history when a user_id is given

    Raises:
        HTTPException 400: If the query is empty
        HTTPException 500: If query processing fails
    """
    query = request_body.query
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="Query is required and cannot be empty")

    user_id = request_body.user_id
    logger.info(f"[CHAT] Processing query from user {user_id or 'anonymous'}: {query}")

    try:
        result = process_query(query, services)
        query_id = generate_query_id()

        if user_id:
            store_exchange(services.supabase, query_id, user_id, query, result.response, result.confidence)

        return ChatQueryResponse(
            query_id=query_id,
            query=query,
            response=result.response,
            sources=result.sources,
            confidence=result.confidence,
            timestamp=_timestamp(),
            user_id=user_id,
        )

    except Exception as e:
        logger.exception("[CHAT] Query processing failed")
        raise HTTPException(status_code=500, detail=f"Failed to process query: {str(e)}")


@router.get("/history/{user_id}")
async def chat_history(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    services: Services = Depends(get_services),
):
    """A page of the user's past queries and answers, newest first."""
    try:
        entries, total = get_history(services.supabase, user_id, limit=limit, offset=offset)
        return {
            "success": True,
            "data": {
                "user_id": user_id,
                "history": [entry.model_dump() for entry in entries],
                "total": total,
                "limit": limit,
                "offset": offset,
            },
        }
    except Exception as e:
        logger.exception("[CHAT] Failed to fetch chat history")
        raise HTTPException(status_code=500, detail=f"Failed to fetch chat history: {str(e)}")


@router.post("/feedback")
async def chat_feedback(request_body: FeedbackRequest, services: Services = Depends(get_services)):
    """Record a 1-5 rating for an answered query."""
    if not request_body.query_id or not request_body.rating:
        raise HTTPException(status_code=400, detail="Query ID and rating are required")

    if request_body.rating < 1 or request_body.rating > 5:
        raise HTTPException(status_code=400, detail="Rating must be between 1 and 5")

    logger.info(f"[CHAT] Feedback received for query {request_body.query_id}: {request_body.rating}/5")

    try:
        store_feedback(
            services.supabase,
            query_id=request_body.query_id,
            rating=request_body.rating,
            feedback=request_body.feedback,
            user_id=request_body.user_id,
        )
        return {
            "success": True,
            "message": "Feedback submitted successfully",
            "data": {
                "query_id": request_body.query_id,
                "rating": request_body.rating,
                "feedback": request_body.feedback,
                "user_id": request_body.user_id,
                "timestamp": _timestamp(),
            },
        }
    except Exception as e:
        logger.exception("[CHAT] Failed to submit feedback")
        raise HTTPException(status_code=500, detail=f"Failed to submit feedback: {str(e)}")


@router.get("/suggestions")
async def chat_suggestions():
    """Four example queries picked at random."""
    return {"success": True, "data": {"suggestions": random.sample(SUGGESTIONS, 4), "timestamp": _timestamp()}}
