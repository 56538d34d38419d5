"""HTTP middleware — request ids and access logging."""

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def request_id_of(request: Request) -> str:
    return str(getattr(request.state, "request_id", None) or "unknown_request")


def register_middleware(app: FastAPI) -> None:
    """Attach the request-id / request-logging middleware to ``app``."""

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed [request_id=%s]", request.method, request.url.path, request_id
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "%s %s -> %d (%.1f ms) [request_id=%s]",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        return response
