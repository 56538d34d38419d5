"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from pharmagenie.presentation.api.v1.endpoints.health import router as health_router
from pharmagenie.presentation.api.v1.endpoints.chat import router as chat_router
from pharmagenie.presentation.api.v1.endpoints.trials import router as trials_router
from pharmagenie.presentation.api.v1.endpoints.export import router as export_router
from pharmagenie.presentation.api.v1.endpoints.genai import router as genai_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(chat_router)
router.include_router(trials_router)
router.include_router(export_router)
router.include_router(genai_router)
