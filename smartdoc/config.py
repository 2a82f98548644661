"""
Centralized configuration for the SmartDoc platform.

All environment variables, constants, and client factories live here.
Settings and clients are built once at startup and passed explicitly to
whatever needs them (see main.py and smartdoc.api.deps).
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional, Union

from dotenv import load_dotenv
from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field
from supabase import Client, create_client
from voyageai.client import Client as VoyageAI

from smartdoc.models.embeddings import EmbeddingModel

# =============================================================================
# Constants
# =============================================================================

APP_NAME = "SmartDoc RAG"
APP_VERSION = "1.0.0"

# text-embedding-ada-002 accepts 8192 tokens; stay well under it in characters
DEFAULT_MAX_CHUNK_SIZE = 8000

ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt", ".html")


class Tables:
    """Database table names."""

    DOCUMENTS = "documents"
    KNOWLEDGE = "knowledge_items"
    CHAT_HISTORY = "chat_history"
    CHAT_FEEDBACK = "chat_feedback"


class RPCFunctions:
    """Supabase RPC function names."""

    MATCH_DOCUMENTS = "match_documents"
    MATCH_KNOWLEDGE = "match_knowledge"


# =============================================================================
# Settings
# =============================================================================


def _require(name: str, *fallbacks: str) -> str:
    for key in (name, *fallbacks):
        value = os.getenv(key)
        if value:
            return value
    names = " (or ".join((name, *fallbacks)) + ")" * len(fallbacks)
    raise ValueError(f"{names} must be set in environment variables")


class Settings(BaseModel):
    """Application settings, read from the environment once at startup."""

    model_config = ConfigDict(use_enum_values=True)

    openai_api_key: str
    supabase_url: str
    supabase_key: str
    voyage_api_key: Optional[str] = None

    # Model configuration
    embed_provider: Literal["openai", "voyage"] = "openai"
    embed_model: EmbeddingModel = EmbeddingModel.ADA_002.value
    embed_dimensions: int = Field(1536, ge=1)
    chat_model: str = "gpt-4"
    analysis_model: str = "gpt-3.5-turbo"

    # Document handling
    max_chunk_size: int = Field(DEFAULT_MAX_CHUNK_SIZE, ge=1)
    upload_dir: str = "uploads"
    max_upload_bytes: int = Field(10 * 1024 * 1024, ge=1)

    # Server
    client_url: str = "http://localhost:3000"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Build settings from environment variables (and .env if present).

        Raises:
            ValueError: If a required variable is missing
        """
        load_dotenv(env_file)

        embed_provider = os.getenv("EMBED_PROVIDER", "openai").lower()
        voyage_api_key = os.getenv("VOYAGE_API_KEY")
        if embed_provider == "voyage" and not voyage_api_key:
            raise ValueError("VOYAGE_API_KEY must be set when EMBED_PROVIDER=voyage")

        return cls(
            openai_api_key=_require("OPENAI_API_KEY"),
            supabase_url=_require("SUPABASE_URL"),
            supabase_key=_require("SUPABASE_SERVICE_KEY", "SUPABASE_SERVICE_ROLE_KEY"),
            voyage_api_key=voyage_api_key,
            embed_provider=embed_provider,
            embed_model=os.getenv("EMBED_MODEL", "text-embedding-ada-002"),
            embed_dimensions=int(os.getenv("EMBED_DIMENSIONS", "1536")),
            chat_model=os.getenv("CHAT_MODEL", "gpt-4"),
            analysis_model=os.getenv("ANALYSIS_MODEL", "gpt-3.5-turbo"),
            max_chunk_size=int(os.getenv("MAX_CHUNK_SIZE", str(DEFAULT_MAX_CHUNK_SIZE))),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
            client_url=os.getenv("CLIENT_URL", "http://localhost:3000"),
            environment=os.getenv("ENVIRONMENT", "development"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


# =============================================================================
# Client Factories
# =============================================================================


def create_openai(settings: Settings) -> OpenAI:
    """Create the OpenAI client (chat + optional embeddings)."""
    return OpenAI(api_key=settings.openai_api_key, timeout=30.0)


def create_embed_client(settings: Settings) -> Union[OpenAI, VoyageAI]:
    """
    Create the embedding client for the configured provider.

    Returns:
        OpenAI or VoyageAI client

    Raises:
        ValueError: If the provider is not supported
    """
    if settings.embed_provider == "openai":
        return create_openai(settings)
    elif settings.embed_provider == "voyage":
        return VoyageAI(api_key=settings.voyage_api_key, timeout=30.0)
    else:
        raise ValueError(f"Unsupported provider: {settings.embed_provider}. Must be 'openai' or 'voyage'.")


def create_supabase(settings: Settings) -> Client:
    """Create the Supabase client."""
    return create_client(settings.supabase_url, settings.supabase_key)


@dataclass
class Services:
    """External clients shared by request handlers for the life of the process."""

    settings: Settings
    chat_client: OpenAI
    embed_client: Union[OpenAI, VoyageAI]
    supabase: Client


def build_services(settings: Settings) -> Services:
    """Construct every external client once, at process startup."""
    return Services(
        settings=settings,
        chat_client=create_openai(settings),
        embed_client=create_embed_client(settings),
        supabase=create_supabase(settings),
    )
