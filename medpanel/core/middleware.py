"""
FastAPI middleware for request logging.

Every request gets a short request_id, returned in the X-Request-ID
header. Requests under /api/v1/sessions/{session_id} also bind that
session id to the log context, so lines logged by the pipeline or the
dashboard for that request name the session they belong to.
"""

import logging
import re
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from medpanel.core.logging_config import clear_request_id, session_context, set_request_id

logger = logging.getLogger(__name__)

SESSION_PATH = re.compile(r"^/api/v1/sessions/(?P<session_id>[^/]+)")


def session_id_from_path(path: str) -> Optional[str]:
    """Return the session id addressed by a sessions API path, if any."""
    match = SESSION_PATH.match(path)
    return match.group("session_id") if match else None


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with status and duration."""

    # Liveness probes and browser noise
    QUIET_PATHS = {"/health", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        set_request_id(request_id)
        path = request.url.path
        start_time = time.perf_counter()

        try:
            with session_context(session_id_from_path(path)):
                try:
                    response = await call_next(request)
                except Exception:
                    logger.exception(
                        "Request failed with exception",
                        extra={"method": request.method, "path": path},
                    )
                    raise

                if path not in self.QUIET_PATHS:
                    logger.log(
                        logging.WARNING if response.status_code >= 400 else logging.INFO,
                        f"{request.method} {path} -> {response.status_code}",
                        extra={
                            "status_code": response.status_code,
                            "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                        },
                    )
        finally:
            clear_request_id()

        response.headers["X-Request-ID"] = request_id
        return response
