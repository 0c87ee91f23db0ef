"""
Health check endpoint.
"""
import logging
import time

from fastapi import APIRouter, Depends

from replydesk.core.settings import settings
from replydesk.db import check_database_health
from replydesk.deps import get_ai_gateway, get_storage
from replydesk.services.ai_gateway import AIGateway
from replydesk.storage import SqlStorage, StorageBackend

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
def health_check(
    storage: StorageBackend = Depends(get_storage),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    """Service status plus the state of the store and the LLM provider."""
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.environment,
        "storage": {"backend": storage.BACKEND_NAME, "status": "healthy"},
        "llm": {
            "provider": gateway.provider.PROVIDER_NAME,
            "model": gateway.provider.model,
            "status": "configured" if gateway.provider.is_available() else "not_configured",
        },
    }

    if isinstance(storage, SqlStorage):
        db_health = check_database_health(storage.engine)
        health_status["storage"].update(db_health)
        if db_health["status"] != "healthy":
            health_status["status"] = "degraded"

    # Without a provider every AI call falls back to its default payload
    if not gateway.provider.is_available():
        logger.warning("[health] LLM provider not configured; AI results will be degraded")
        health_status["status"] = "degraded"

    return health_status
