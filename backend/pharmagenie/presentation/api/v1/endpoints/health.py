"""Health check endpoint — reports version and per-collection record counts."""

import logging

from fastapi import APIRouter, Depends

from pharmagenie.application.services import TrialService
from pharmagenie.config import get_settings
from pharmagenie.infrastructure.dependencies import get_trial_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    service: TrialService = Depends(get_trial_service),
) -> dict:
    """Returns the current application health status.

    The endpoint stays up when the database is down; counts are then
    omitted and ``database`` reads ``unavailable``.
    """
    settings = get_settings()
    payload: dict = {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
    }
    try:
        payload["collections"] = await service.collection_counts()
        payload["database"] = "connected"
    except Exception as exc:
        logger.warning("Health check could not reach the record store: %s", exc)
        payload["database"] = "unavailable"
    return payload
