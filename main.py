"""
Backend FastAPI for SmartDoc RAG and SmartKnowledge Agent

Run with `python main.py`, or `uvicorn main:create_app --factory`.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from smartdoc.api.chat import router as chat_router
from smartdoc.api.documents import router as documents_router
from smartdoc.api.health import router as health_router
from smartdoc.api.knowledge import router as knowledge_router
from smartdoc.config import APP_NAME, APP_VERSION, Services, Settings, build_services

# Setup logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# ===============================
# FASTAPI APP
# ===============================
def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (read from the environment if omitted)
        services: Prebuilt clients; built from settings on startup if omitted

    Returns:
        Configured FastAPI app
    """
    if services is not None:
        settings = services.settings
    elif settings is None:
        settings = Settings.from_env()

    logging.getLogger().setLevel(settings.log_level)

    app = FastAPI(title=APP_NAME, description="Document and knowledge retrieval API with RAG", version=APP_VERSION)
    app.state.services = services

    @app.on_event("startup")
    async def startup_event():
        """Create external clients once for the life of the process."""
        logger.info(f"Starting {APP_NAME} API...")
        if app.state.services is None:
            app.state.services = build_services(settings)
            logger.info(f"Clients initialized (embeddings: {settings.embed_provider}/{settings.embed_model}, chat: {settings.chat_model})")
        logger.info(f"Environment: {settings.environment}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {APP_NAME} API...")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # Allow CORS (for the frontend to call the backend)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routes
    app.include_router(health_router)
    app.include_router(documents_router)
    app.include_router(knowledge_router)
    app.include_router(chat_router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
