import json
import logging
import math
from typing import Dict, List, Union

from openai import OpenAI
from voyageai.client import Client as VoyageAI

from smartdoc.config import DEFAULT_MAX_CHUNK_SIZE, Services
from smartdoc.models import DocumentAnalysis, DocumentChunk, Embedding, QueryResult, SourceReference
from smartdoc.utils.chunking import average_vectors, split_into_chunks
from smartdoc.utils.errors import EmptyInputError, ParseError
from smartdoc.utils.vector_store import search_knowledge

logger = logging.getLogger(__name__)

# Characters of a document sent to the analysis model
ANALYSIS_CHAR_LIMIT = 4000

NO_KNOWLEDGE_RESPONSE = (
    "I couldn't find any relevant information in the knowledge base for your query. "
    "Please try rephrasing your question or add more context."
)

DOCUMENT_SYSTEM_PROMPT = """You are SmartDoc RAG, an AI assistant specialized in document analysis and knowledge retrieval.
Your task is to provide accurate, helpful responses based on the provided document context.

Guidelines:
- Use only information from the provided documents
- If the answer isn't in the documents, clearly state that
- Provide specific references to document sections when possible
- Be concise but comprehensive
- Maintain a professional and helpful tone"""

KNOWLEDGE_SYSTEM_PROMPT = """You are SmartKnowledge Agent, an AI assistant that helps users find and synthesize information from multiple knowledge sources.

Use the provided context to answer the user's question accurately and comprehensively. If the context doesn't contain enough information, say so clearly.

Context:
{context}"""


# ===============================
# EMBEDDING FUNCTIONS
# ===============================
def create_embedding(text: str, embed_client: Union[OpenAI, VoyageAI], embed_model: str) -> Embedding:
    """Generate a single embedding with OpenAI or Voyage AI. Returns an Embedding with text and vector."""
    if isinstance(embed_client, OpenAI):
        response = embed_client.embeddings.create(
            model=embed_model,
            input=text,
        )
        if not response.data:
            raise ValueError("OpenAI embedding returned no data")
        vec = response.data[0].embedding
        usage = getattr(response, "usage", None)
        tokens_used = usage.total_tokens if usage else None
    elif isinstance(embed_client, VoyageAI):
        response = embed_client.embed(
            model=embed_model,
            texts=[text],
        )
        vec = response.embeddings[0]
        tokens_used = getattr(response, "total_tokens", None)
    else:
        raise ValueError(f"Unsupported embed client: {type(embed_client)}. Must be OpenAI or VoyageAI.")

    return Embedding(text=text, embedding=vec, model=embed_model, dimension=len(vec), tokens_used=tokens_used)


def chunk_document(text: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> List[DocumentChunk]:
    """Split a document into ordered DocumentChunk objects."""
    return [DocumentChunk(content=content, index=i) for i, content in enumerate(split_into_chunks(text, max_chunk_size))]


def embed_document(
    text: str,
    embed_client: Union[OpenAI, VoyageAI],
    embed_model: str,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
) -> List[float]:
    """
    Generate one embedding for a whole document.

    The text is chunked, each chunk is embedded with its own request (one at
    a time, in order), and the chunk vectors are averaged. A document that
    fits in a single chunk gets that chunk's vector unchanged.

    Args:
        text: Document text
        embed_client: Embedding client (OpenAI or VoyageAI)
        embed_model: Embedding model name
        max_chunk_size: Maximum characters per chunk

    Returns:
        Document embedding vector

    Raises:
        EmptyInputError: If text is empty or whitespace-only
        InvalidChunkSizeError: If max_chunk_size is not positive
        DimensionMismatchError: If the provider returned vectors of different lengths
        RuntimeError: If the embedding provider fails
    """
    if not text or not text.strip():
        raise EmptyInputError("Text cannot be empty")

    return embed_chunks(chunk_document(text, max_chunk_size), embed_client, embed_model)


def embed_chunks(chunks: List[DocumentChunk], embed_client: Union[OpenAI, VoyageAI], embed_model: str) -> List[float]:
    """
    Embed chunks one request at a time and average the vectors.

    Raises:
        EmptyInputError: If there are no chunks
        RuntimeError: If the embedding provider fails
    """
    if not chunks:
        raise EmptyInputError("Text cannot be empty")

    logger.debug(f"[EMBED] Embedding {len(chunks)} chunk(s)")

    vectors = []
    for chunk in chunks:
        try:
            vectors.append(create_embedding(chunk.content, embed_client, embed_model).embedding)
        except Exception as e:
            logger.error(f"[EMBED] Error generating embeddings for chunk {chunk.index}: {e}")
            raise RuntimeError(f"Failed to generate embeddings: {e}") from e

    return average_vectors(vectors)


# ===============================
# ANSWER GENERATION
# ===============================
def generate_document_answer(query: str, search_results: List[Dict], chat_client: OpenAI, chat_model: str) -> str:
    """
    Generate an answer to a document search query.

    Args:
        query: User's search query
        search_results: Relevant documents from vector search (need a "content" key)
        chat_client: OpenAI client
        chat_model: Chat model name

    Returns:
        AI-generated response
    """
    context = "\n\n".join(f"Document {i + 1}: {result.get('content', '')}" for i, result in enumerate(search_results))

    user_prompt = f"""Query: {query}

Relevant Documents:
{context}

Please provide a comprehensive answer based on the above documents."""

    response = chat_client.chat.completions.create(
        model=chat_model,
        messages=[{"role": "system", "content": DOCUMENT_SYSTEM_PROMPT}, {"role": "user", "content": user_prompt}],
        max_tokens=1000,
        temperature=0.3,
    )
    return response.choices[0].message.content


def generate_knowledge_answer(query: str, context: List[Dict], chat_client: OpenAI, chat_model: str) -> str:
    """Generate an answer from knowledge items, with the items numbered in the system message."""
    numbered = "\n\n".join(f"{i + 1}. {item['text']}" for i, item in enumerate(context))

    response = chat_client.chat.completions.create(
        model=chat_model,
        messages=[
            {"role": "system", "content": KNOWLEDGE_SYSTEM_PROMPT.format(context=numbered)},
            {"role": "user", "content": query},
        ],
        temperature=0.7,
        max_tokens=1000,
    )
    return response.choices[0].message.content


def process_query(query: str, services: Services, top_k: int = 5) -> QueryResult:
    """
    Answer a chat query from the knowledge base.

    Returns the fixed "nothing found" answer with zero confidence when no
    knowledge matches; otherwise the generated answer, its sources and the
    mean match score as confidence.
    """
    settings = services.settings
    query_embedding = create_embedding(query, services.embed_client, settings.embed_model)
    matches = search_knowledge(services.supabase, query_embedding.embedding, top_k)

    if not matches:
        return QueryResult(response=NO_KNOWLEDGE_RESPONSE, sources=[], confidence=0.0)

    response = generate_knowledge_answer(
        query, [match.model_dump() for match in matches], services.chat_client, settings.chat_model
    )
    confidence = sum(match.score for match in matches) / len(matches)

    sources = [
        SourceReference(id=match.id, text=match.text[:200] + "...", score=match.score, metadata=match.metadata)
        for match in matches
    ]
    return QueryResult(response=response, sources=sources, confidence=confidence)


# ===============================
# DOCUMENT ANALYSIS
# ===============================
def extract_topics_and_entities(text: str, chat_client: OpenAI, chat_model: str) -> DocumentAnalysis:
    """
    Extract key topics, entities, themes and a category from a document.

    Raises:
        ParseError: If the model response is not a JSON object with the expected keys
    """
    prompt = f"""Analyze the following text and extract:
1. Key topics (max 10)
2. Important entities (people, organizations, locations, dates)
3. Main themes
4. Document type/category

Text: {text[:ANALYSIS_CHAR_LIMIT]}

Provide the response in JSON format with keys: topics, entities, themes, category."""

    response = chat_client.chat.completions.create(
        model=chat_model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=500,
        temperature=0.2,
    )
    content = response.choices[0].message.content or ""

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Analysis response is not valid JSON: {e}", raw=content) from e

    if not isinstance(data, dict):
        raise ParseError("Analysis response is not a JSON object", raw=content)

    try:
        return DocumentAnalysis(**{k: v for k, v in data.items() if v is not None})
    except (TypeError, ValueError) as e:
        raise ParseError(f"Analysis response has unexpected fields: {e}", raw=content) from e


def generate_summary(text: str, chat_client: OpenAI, chat_model: str, max_length: int = 200) -> str:
    """Summarize a document in approximately max_length words."""
    prompt = f"""Provide a concise summary of the following document in approximately {max_length} words:

{text[:ANALYSIS_CHAR_LIMIT]}"""

    response = chat_client.chat.completions.create(
        model=chat_model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=math.ceil(max_length * 1.5),
        temperature=0.3,
    )
    return response.choices[0].message.content
