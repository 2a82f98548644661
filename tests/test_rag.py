"""
Tests for embedding orchestration, answer generation and document analysis.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from conftest import make_chat_response, make_embedding_response
from voyageai.client import Client as VoyageAI

from smartdoc.models import KnowledgeItem
from smartdoc.utils.errors import DimensionMismatchError, EmptyInputError, InvalidChunkSizeError, ParseError
from smartdoc.utils.rag import (
    NO_KNOWLEDGE_RESPONSE,
    chunk_document,
    create_embedding,
    embed_document,
    extract_topics_and_entities,
    generate_document_answer,
    generate_knowledge_answer,
    generate_summary,
    process_query,
)


# ===============================
# create_embedding
# ===============================
def test_create_embedding_with_openai(embed_client):
    embedding = create_embedding("hello", embed_client, "text-embedding-ada-002")

    assert embedding.embedding == [0.1, 0.2, 0.3]
    assert embedding.dimension == 3
    assert embedding.text == "hello"
    assert embedding.tokens_used == 3
    embed_client.embeddings.create.assert_called_once_with(model="text-embedding-ada-002", input="hello")


def test_create_embedding_with_voyage():
    client = MagicMock(spec=VoyageAI)
    client.embed = MagicMock()
    client.embed.return_value = MagicMock(embeddings=[[1.0, 2.0]], total_tokens=4)

    embedding = create_embedding("hello", client, "voyage-3")

    assert embedding.embedding == [1.0, 2.0]
    assert embedding.tokens_used == 4
    client.embed.assert_called_once_with(model="voyage-3", texts=["hello"])


def test_create_embedding_rejects_unknown_client():
    with pytest.raises(ValueError, match="Unsupported embed client"):
        create_embedding("hello", object(), "model")


def test_create_embedding_rejects_empty_response(embed_client):
    embed_client.embeddings.create.return_value = MagicMock(data=[])

    with pytest.raises(ValueError, match="no data"):
        create_embedding("hello", embed_client, "model")


# ===============================
# embed_document
# ===============================
def test_chunk_document_indexes_chunks():
    chunks = chunk_document("First sentence here. Second sentence here.", 25)

    assert [chunk.index for chunk in chunks] == [0, 1]
    assert [chunk.content for chunk in chunks] == ["First sentence here.", "Second sentence here."]


def test_embed_document_single_chunk_is_pass_through(embed_client):
    vector = embed_document("A short document.", embed_client, "model")

    assert vector == [0.1, 0.2, 0.3]
    assert embed_client.embeddings.create.call_count == 1


def test_embed_document_one_call_per_chunk_in_order(embed_client):
    embed_client.embeddings.create.side_effect = [
        make_embedding_response([1.0, 0.0]),
        make_embedding_response([0.0, 1.0]),
        make_embedding_response([2.0, 2.0]),
    ]

    vector = embed_document("Alpha alpha. Beta beta. Gamma gamma.", embed_client, "model", max_chunk_size=13)

    inputs = [call.kwargs["input"] for call in embed_client.embeddings.create.call_args_list]
    assert inputs == ["Alpha alpha.", "Beta beta.", "Gamma gamma."]
    assert vector == pytest.approx([1.0, 1.0])


@pytest.mark.parametrize("text", ["", "   \n"])
def test_embed_document_rejects_empty_text(embed_client, text):
    with pytest.raises(EmptyInputError):
        embed_document(text, embed_client, "model")

    embed_client.embeddings.create.assert_not_called()


def test_embed_document_rejects_bad_chunk_size(embed_client):
    with pytest.raises(InvalidChunkSizeError):
        embed_document("Some text.", embed_client, "model", max_chunk_size=0)


def test_embed_document_detects_dimension_mismatch(embed_client):
    embed_client.embeddings.create.side_effect = [
        make_embedding_response([1.0, 0.0, 0.0]),
        make_embedding_response([1.0, 0.0]),
    ]

    with pytest.raises(DimensionMismatchError):
        embed_document("Alpha alpha. Beta beta.", embed_client, "model", max_chunk_size=13)


def test_embed_document_wraps_provider_errors(embed_client):
    embed_client.embeddings.create.side_effect = ConnectionError("network down")

    with pytest.raises(RuntimeError, match="Failed to generate embeddings: network down"):
        embed_document("Some text.", embed_client, "model")


# ===============================
# Answer generation
# ===============================
def test_generate_document_answer_builds_numbered_context(chat_client):
    results = [{"content": "Paris is in France."}, {"content": "Berlin is in Germany."}]

    answer = generate_document_answer("Where is Paris?", results, chat_client, "gpt-4")

    assert answer == "Generated answer"
    kwargs = chat_client.chat.completions.create.call_args.kwargs
    user_prompt = kwargs["messages"][1]["content"]
    assert "Document 1: Paris is in France." in user_prompt
    assert "Document 2: Berlin is in Germany." in user_prompt
    assert kwargs["temperature"] == 0.3
    assert kwargs["max_tokens"] == 1000


def test_generate_knowledge_answer_puts_context_in_system_message(chat_client):
    generate_knowledge_answer("What is RAG?", [{"text": "RAG combines retrieval and generation."}], chat_client, "gpt-4")

    messages = chat_client.chat.completions.create.call_args.kwargs["messages"]
    assert "1. RAG combines retrieval and generation." in messages[0]["content"]
    assert messages[1] == {"role": "user", "content": "What is RAG?"}


def test_generate_summary_scales_max_tokens(chat_client):
    generate_summary("Long document text", chat_client, "gpt-3.5-turbo", max_length=101)

    assert chat_client.chat.completions.create.call_args.kwargs["max_tokens"] == 152


# ===============================
# process_query
# ===============================
def test_process_query_without_matches(services):
    with patch("smartdoc.utils.rag.search_knowledge", return_value=[]):
        result = process_query("Anything?", services)

    assert result.response == NO_KNOWLEDGE_RESPONSE
    assert result.sources == []
    assert result.confidence == 0
    services.chat_client.chat.completions.create.assert_not_called()


def test_process_query_with_matches(services):
    matches = [
        KnowledgeItem(id="k1", text="A" * 250, score=0.9, metadata={"source": "faq"}),
        KnowledgeItem(id="k2", text="Short", score=0.7),
    ]

    with patch("smartdoc.utils.rag.search_knowledge", return_value=matches) as search:
        result = process_query("What is A?", services)

    search.assert_called_once_with(services.supabase, [0.1, 0.2, 0.3], 5)
    assert result.response == "Generated answer"
    assert result.confidence == pytest.approx(0.8)
    assert result.sources[0].text == "A" * 200 + "..."
    assert result.sources[1].text == "Short..."
    assert result.sources[0].metadata == {"source": "faq"}


# ===============================
# Document analysis
# ===============================
def test_extract_topics_and_entities(chat_client):
    payload = {"topics": ["ai"], "entities": ["OpenAI"], "themes": ["search"], "category": "technical"}
    chat_client.chat.completions.create.return_value = make_chat_response(json.dumps(payload))

    analysis = extract_topics_and_entities("x" * 5000, chat_client, "gpt-3.5-turbo")

    assert analysis.topics == ["ai"]
    assert analysis.category == "technical"
    prompt = chat_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert "x" * 4000 in prompt
    assert "x" * 4001 not in prompt


@pytest.mark.parametrize("content", ["not json at all", "[1, 2, 3]", '{"topics": "not a list"}'])
def test_extract_topics_and_entities_raises_parse_error(chat_client, content):
    chat_client.chat.completions.create.return_value = make_chat_response(content)

    with pytest.raises(ParseError) as exc_info:
        extract_topics_and_entities("Some text", chat_client, "gpt-3.5-turbo")

    assert exc_info.value.raw == content
