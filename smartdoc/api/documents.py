"""
SmartDoc document endpoints: upload, search, analysis, listing and analytics
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from smartdoc.api.deps import get_services
from smartdoc.config import Services
from smartdoc.models import (
    AnalyzeRequest,
    AnalyzeResponse,
    DocumentAnalysis,
    DocumentMetadata,
    SearchRequest,
    SearchResponse,
    UploadResponse,
)
from smartdoc.utils import vector_store
from smartdoc.utils.document_processor import INVALID_TYPE_MESSAGE, extract_text, is_allowed_file
from smartdoc.utils.errors import EmptyInputError, ParseError, UnsupportedFileTypeError
from smartdoc.utils.rag import (
    chunk_document,
    create_embedding,
    embed_chunks,
    extract_topics_and_entities,
    generate_document_answer,
    generate_summary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _upload_path(upload_dir: str, filename: str) -> Path:
    """Unique on-disk name for an upload, keeping the original extension."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    suffix = uuid.uuid4().hex
    return directory / f"document-{suffix}{Path(filename).suffix.lower()}"


@router.post("/documents/upload", response_model=UploadResponse)
async def upload_document(document: Optional[UploadFile] = File(None), services: Services = Depends(get_services)):
    """
    Upload a document, extract its text, embed it and index it.

    The uploaded file is written to the upload directory only for the
    duration of the request.

    Raises:
        HTTPException 400: If no file, an unsupported type, an oversized file or no extractable text
        HTTPException 500: If processing fails
    """
    if document is None or not document.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if not is_allowed_file(document.filename):
        raise HTTPException(status_code=400, detail=INVALID_TYPE_MESSAGE)

    settings = services.settings
    data = await document.read()
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=400, detail=f"File too large. Maximum size is {settings.max_upload_bytes} bytes.")

    logger.info(f"[UPLOAD] Processing document: {document.filename}")
    path = _upload_path(settings.upload_dir, document.filename)

    try:
        path.write_bytes(data)

        text = extract_text(str(path), document.filename)
        chunks = chunk_document(text, settings.max_chunk_size)
        chunk_count = len(chunks)
        embedding = embed_chunks(chunks, services.embed_client, settings.embed_model)

        metadata = DocumentMetadata(
            upload_date=_timestamp(),
            file_size=len(data),
            mime_type=document.content_type,
            chunk_count=chunk_count,
        )
        document_id = vector_store.store_document(
            services.supabase,
            filename=document.filename,
            content=text,
            embedding=embedding,
            metadata=metadata.model_dump(),
        )

        return UploadResponse(
            document_id=document_id,
            filename=document.filename,
            content_length=len(text),
            chunk_count=chunk_count,
        )

    except EmptyInputError:
        raise HTTPException(status_code=400, detail="No text could be extracted from the document")
    except UnsupportedFileTypeError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.exception("[UPLOAD] Document processing failed")
        raise HTTPException(status_code=500, detail=f"Document processing failed: {str(e)}")
    finally:
        if path.exists():
            os.remove(path)


@router.post("/documents/search", response_model=SearchResponse)
async def search_documents(request_body: SearchRequest, services: Services = Depends(get_services)):
    """Search indexed documents and synthesize an answer from the best matches."""
    query = (request_body.query or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query is required")

    logger.info(f"[SEARCH] Searching for: {query}")

    try:
        settings = services.settings
        query_embedding = create_embedding(query, services.embed_client, settings.embed_model)
        results = vector_store.search_similar(services.supabase, query_embedding.embedding, request_body.limit)
        ai_response = generate_document_answer(query, results, services.chat_client, settings.chat_model)

        return SearchResponse(query=query, results=results, ai_response=ai_response, timestamp=_timestamp())

    except Exception as e:
        logger.exception("[SEARCH] Search failed")
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")


@router.post("/documents/analyze", response_model=AnalyzeResponse)
async def analyze_document(request_body: AnalyzeRequest, services: Services = Depends(get_services)):
    """
    Extract topics/entities and a summary from document text.

    An unparseable analysis falls back to an empty analysis with
    analysis_parsed=False; the summary is still returned.
    """
    text = request_body.text or ""
    if not text.strip():
        raise HTTPException(status_code=400, detail="Text content is required and cannot be empty")

    try:
        model = services.settings.analysis_model
        try:
            analysis = extract_topics_and_entities(text, services.chat_client, model)
            parsed = True
        except ParseError as e:
            logger.warning(f"[ANALYZE] Failed to parse analysis response: {e.message}")
            analysis = DocumentAnalysis()
            parsed = False

        summary = generate_summary(text, services.chat_client, model, max_length=request_body.summary_length)

        return AnalyzeResponse(analysis=analysis, analysis_parsed=parsed, summary=summary, timestamp=_timestamp())

    except Exception as e:
        logger.exception("[ANALYZE] Analysis failed")
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")


@router.get("/documents")
async def list_documents(services: Services = Depends(get_services)):
    """List all indexed documents."""
    try:
        documents = vector_store.list_documents(services.supabase)
        return {"success": True, "documents": [doc.model_dump() for doc in documents], "count": len(documents)}
    except Exception as e:
        logger.exception("[DOCUMENTS] Listing failed")
        raise HTTPException(status_code=500, detail=f"Failed to fetch documents: {str(e)}")


@router.delete("/documents/{document_id}")
async def delete_document(document_id: str, services: Services = Depends(get_services)):
    """Delete an indexed document."""
    try:
        vector_store.delete_document(services.supabase, document_id)
        return {"success": True, "message": "Document deleted successfully"}
    except LookupError:
        raise HTTPException(status_code=404, detail="Document not found")
    except Exception as e:
        logger.exception("[DOCUMENTS] Delete failed")
        raise HTTPException(status_code=500, detail=f"Failed to delete document: {str(e)}")


@router.get("/analytics")
async def get_analytics(services: Services = Depends(get_services)):
    """Document counts and sizes."""
    try:
        analytics = vector_store.get_analytics(services.supabase)
        return {"success": True, "analytics": analytics.model_dump(), "timestamp": _timestamp()}
    except Exception as e:
        logger.exception("[ANALYTICS] Failed to fetch analytics")
        raise HTTPException(status_code=500, detail=f"Failed to fetch analytics: {str(e)}")
