"""HTTP middleware for request/response logging."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Slow request threshold in milliseconds
SLOW_REQUEST_THRESHOLD_MS = 1000

# Polled endpoints logged at DEBUG on success
QUIET_PATHS = frozenset({"/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every HTTP request with its status and latency.

    For streamed chat responses the latency is time to first byte, since the
    response body is still being produced when call_next returns.

    Log levels:
    - DEBUG: Request start, successful health checks
    - INFO: Successful responses
    - WARNING: 4xx errors, slow requests (>1s)
    - ERROR: 5xx errors
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        logger.debug("%s %s", request.method, request.url.path)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._log_response(request, response, duration_ms)
        return response

    def _log_response(
        self, request: Request, response: Response, duration_ms: float
    ) -> None:
        method = request.method
        path = request.url.path
        status = response.status_code
        streaming = response.headers.get("content-type", "").startswith(
            "text/event-stream"
        )
        suffix = " stream opened" if streaming else ""

        if status >= 500:
            logger.error("%s %s -> %d (%.1fms)", method, path, status, duration_ms)
        elif status >= 400:
            logger.warning("%s %s -> %d (%.1fms)", method, path, status, duration_ms)
        elif duration_ms > SLOW_REQUEST_THRESHOLD_MS and not streaming:
            logger.warning(
                "%s %s -> %d (%.1fms) SLOW", method, path, status, duration_ms
            )
        elif path in QUIET_PATHS:
            logger.debug("%s %s -> %d (%.1fms)", method, path, status, duration_ms)
        else:
            logger.info(
                "%s %s -> %d (%.1fms)%s", method, path, status, duration_ms, suffix
            )
