"""
Health, readiness and liveness probes
"""

import logging
import platform
import time
from datetime import datetime, timezone

import psutil
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from smartdoc.api.deps import get_services
from smartdoc.config import APP_VERSION, Services
from smartdoc.utils.rag import create_embedding
from smartdoc.utils.vector_store import get_knowledge_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uptime() -> float:
    """Seconds since this process started."""
    return time.time() - psutil.Process().create_time()


def _check_vector_db(services: Services):
    return get_knowledge_stats(services.supabase, services.settings.embed_dimensions)


def _check_embeddings(services: Services, text: str) -> None:
    create_embedding(text, services.embed_client, services.settings.embed_model)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


@router.get("")
async def health(services: Services = Depends(get_services)):
    """Basic health check: 200 when every dependency answers, 503 otherwise."""
    status = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "uptime": _uptime(),
        "environment": services.settings.environment,
        "version": APP_VERSION,
        "services": {"api": "healthy", "vector_db": "unknown", "embeddings": "unknown"},
    }

    try:
        _check_vector_db(services)
        status["services"]["vector_db"] = "healthy"
    except Exception as e:
        logger.warning(f"[HEALTH] Vector DB check failed: {e}")
        status["services"]["vector_db"] = "unhealthy"
        status["status"] = "degraded"

    try:
        _check_embeddings(services, "health check")
        status["services"]["embeddings"] = "healthy"
    except Exception as e:
        logger.warning(f"[HEALTH] Embedding check failed: {e}")
        status["services"]["embeddings"] = "unhealthy"
        status["status"] = "degraded"

    return JSONResponse(status_code=200 if status["status"] == "healthy" else 503, content=status)


@router.get("/detailed")
async def detailed_health(services: Services = Depends(get_services)):
    """Health check with per-dependency response times and host resource usage."""
    memory = psutil.Process().memory_info()
    detailed = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "uptime": _uptime(),
        "environment": services.settings.environment,
        "version": APP_VERSION,
        "system": {
            "memory": {
                "rss": memory.rss,
                "vms": memory.vms,
                "percent": psutil.virtual_memory().percent,
            },
            "cpu": {"usage": psutil.cpu_percent(interval=None)},
            "platform": platform.system().lower(),
            "python_version": platform.python_version(),
        },
        "services": {
            "api": {"status": "healthy", "response_time": 0},
            "vector_db": {"status": "unknown", "response_time": 0},
            "embeddings": {"status": "unknown", "response_time": 0},
        },
    }

    start = time.perf_counter()
    try:
        stats = _check_vector_db(services)
        detailed["services"]["vector_db"] = {"status": "healthy", "response_time": _elapsed_ms(start), "stats": stats.model_dump()}
    except Exception as e:
        detailed["services"]["vector_db"] = {"status": "unhealthy", "response_time": _elapsed_ms(start), "error": str(e)}
        detailed["status"] = "degraded"

    start = time.perf_counter()
    try:
        _check_embeddings(services, "health check test")
        detailed["services"]["embeddings"] = {"status": "healthy", "response_time": _elapsed_ms(start)}
    except Exception as e:
        detailed["services"]["embeddings"] = {"status": "unhealthy", "response_time": _elapsed_ms(start), "error": str(e)}
        detailed["status"] = "degraded"

    return JSONResponse(status_code=200 if detailed["status"] == "healthy" else 503, content=detailed)


@router.get("/ready")
async def readiness(services: Services = Depends(get_services)):
    """Readiness probe: 200 only when every dependency is ready."""
    checks = []

    try:
        _check_vector_db(services)
        checks.append({"service": "vector_db", "status": "ready"})
    except Exception as e:
        checks.append({"service": "vector_db", "status": "not ready", "error": str(e)})

    try:
        _check_embeddings(services, "readiness check")
        checks.append({"service": "embeddings", "status": "ready"})
    except Exception as e:
        checks.append({"service": "embeddings", "status": "not ready", "error": str(e)})

    all_ready = all(check["status"] == "ready" for check in checks)
    return JSONResponse(
        status_code=200 if all_ready else 503,
        content={"ready": all_ready, "timestamp": _timestamp(), "checks": checks},
    )


@router.get("/live")
async def liveness():
    """Liveness probe."""
    return {"alive": True, "timestamp": _timestamp(), "uptime": _uptime()}
