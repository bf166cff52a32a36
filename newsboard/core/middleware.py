# newsboard/core/middleware.py
import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("newsboard.http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            status = getattr(response, "status_code", 500)  # 500 if the handler never produced a response
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                status,
                elapsed_ms,
                extra={"event": "http_request", "status_code": status},
            )
