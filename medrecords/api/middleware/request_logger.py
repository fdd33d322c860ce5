import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from medrecords.api.errors import internal_error_response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Tag every request with a correlation id and log it in and out."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info("[%s] %s %s", request_id, request.method, request.url.path)
        if request.query_params:
            logger.debug("[%s] Query: %s", request_id, dict(request.query_params))

        try:
            response = await call_next(request)
        except Exception:
            response = internal_error_response(request)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("[%s] %s - %.0fms", request_id, response.status_code, duration_ms)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
