"""FastAPI middleware: request ID injection and rate limiting."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict, deque
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger = structlog.get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the log context and echoes it as X-Request-ID."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window limit of ``max_requests`` per client IP under ``prefix``.

    Clients idle for a whole window are forgotten, at most one sweep per window.
    """

    def __init__(
        self,
        app: object,
        max_requests: int = 120,
        window_seconds: int = 60,
        prefix: str = "/api/",
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._max_requests = max_requests
        self._window = window_seconds
        self._prefix = prefix
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._last_sweep = 0.0

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._max_requests <= 0 or not request.url.path.startswith(self._prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        if now - self._last_sweep >= self._window:
            self._sweep(now)
        hits = self._hits[client_ip]
        while hits and now - hits[0] >= self._window:
            hits.popleft()

        if len(hits) >= self._max_requests:
            logger.warning("rate_limit_exceeded", ip=client_ip, path=request.url.path)
            return JSONResponse(
                {"detail": "Rate limit exceeded. Try again later."},
                status_code=429,
                headers={"Retry-After": str(self._window)},
            )

        hits.append(now)
        return await call_next(request)

    def _sweep(self, now: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or now - hits[-1] >= self._window]
        for ip in idle:
            del self._hits[ip]
        self._last_sweep = now
        if idle:
            logger.debug("rate_limit_clients_swept", count=len(idle))
