"""
Shared fixtures: settings, fake external clients and a test app.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from openai import OpenAI

from main import create_app
from smartdoc.config import Services, Settings


def make_embedding_response(vector):
    """Shape of an OpenAI embeddings.create() response."""
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)], usage=SimpleNamespace(total_tokens=len(vector)))


def make_chat_response(content):
    """Shape of an OpenAI chat.completions.create() response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="test-openai-key",
        supabase_url="http://localhost:54321",
        supabase_key="test-supabase-key",
        embed_dimensions=3,
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def embed_client() -> MagicMock:
    """OpenAI-typed fake that returns a fixed 3-dimensional embedding."""
    client = MagicMock(spec=OpenAI)
    client.embeddings = MagicMock()
    client.embeddings.create.return_value = make_embedding_response([0.1, 0.2, 0.3])
    return client


@pytest.fixture
def chat_client() -> MagicMock:
    client = MagicMock(spec=OpenAI)
    client.chat = MagicMock()
    client.chat.completions.create.return_value = make_chat_response("Generated answer")
    return client


@pytest.fixture
def services(settings, embed_client, chat_client) -> Services:
    return Services(settings=settings, chat_client=chat_client, embed_client=embed_client, supabase=MagicMock())


@pytest.fixture
def client(services) -> TestClient:
    """Provide TestClient for the app, wired to the fake services."""
    return TestClient(create_app(services=services))
