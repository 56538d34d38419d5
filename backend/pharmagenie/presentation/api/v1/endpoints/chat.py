"""Chatbot endpoints — rule-based query analysis over the record collections."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from pharmagenie.application.schemas import ChatQueryRequest, QueryAnalysisSchema
from pharmagenie.application.services import QueryService
from pharmagenie.application.services.response_formatter import format_chat_response
from pharmagenie.domain.exceptions import StorageUnavailableError
from pharmagenie.infrastructure.dependencies import get_query_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chatbot"])


@router.post("")
async def chat(
    request: ChatQueryRequest,
    service: QueryService = Depends(get_query_service),
) -> dict:
    """Answer a free-text question from the pharma collections.

    Collections whose read failed come back empty and are listed under
    ``missing_collections``.
    """
    analysis = service.analyze(request.query)
    results = await service.fetch(analysis, allow_partial=True)

    totals = None
    if analysis.intent == "count":
        try:
            totals = await service.count(analysis)
        except StorageUnavailableError as e:
            logger.warning("Falling back to page counts: %s", e)

    if results.records and len(results.failures) == len(results.records):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store unavailable",
        )

    response = format_chat_response(request.query, results, analysis, totals)
    if results.is_partial:
        response["missing_collections"] = results.missing_collections
    return response


@router.post("/analyze", response_model=QueryAnalysisSchema)
async def analyze(
    request: ChatQueryRequest,
    service: QueryService = Depends(get_query_service),
) -> QueryAnalysisSchema:
    """Return the analyzer's reading of a query without touching storage."""
    analysis = service.analyze(request.query)
    return QueryAnalysisSchema(**analysis.to_dict())
