"""
Chat History and Feedback

Stores answered chat queries and user feedback in Supabase.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from supabase import Client

from smartdoc.config import Tables
from smartdoc.models import ChatHistoryEntry

logger = logging.getLogger(__name__)


def generate_query_id() -> str:
    """
    Generate a unique query ID

    Returns:
        A UUID string
    """
    return str(uuid.uuid4())


def store_exchange(
    supabase: Client,
    query_id: str,
    user_id: str,
    query: str,
    response: str,
    confidence: Optional[float] = None,
) -> None:
    """
    Store a query and its answer in the user's chat history

    Args:
        supabase: Supabase client
        query_id: ID returned to the client with the answer
        user_id: User the exchange belongs to
        query: The user's query
        response: The generated answer
        confidence: Mean match score of the sources used
    """
    supabase.table(Tables.CHAT_HISTORY).insert(
        {
            "query_id": query_id,
            "user_id": user_id,
            "query": query,
            "response": response,
            "confidence": confidence,
        }
    ).execute()


def get_history(supabase: Client, user_id: str, limit: int = 50, offset: int = 0) -> Tuple[List[ChatHistoryEntry], int]:
    """
    Fetch a page of a user's chat history, newest first

    Returns:
        (entries, total number of entries for the user)
    """
    result = (
        supabase.table(Tables.CHAT_HISTORY)
        .select("query_id, query, response, confidence, created_at", count="exact")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )

    entries = [ChatHistoryEntry(**row) for row in result.data or []]
    total = result.count if result.count is not None else len(entries)
    return entries, total


def store_feedback(supabase: Client, query_id: str, rating: int, feedback: Optional[str] = None, user_id: Optional[str] = None) -> None:
    """Store a 1-5 rating (and optional comment) for an answered query"""
    supabase.table(Tables.CHAT_FEEDBACK).insert(
        {
            "query_id": query_id,
            "rating": rating,
            "feedback": feedback,
            "user_id": user_id,
        }
    ).execute()
    logger.info(f"[FEEDBACK] Stored rating {rating}/5 for query {query_id}")
