import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response, status

from ezbase.app import App
from ezbase.core.modules.log.models import RequestLog
from ezbase.errors import StoreError

logger = structlog.get_logger(__name__)


async def trace_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Append one RequestLog entry per request to the log store, including requests that crash."""
    started = time.perf_counter()
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        await _record(request, status_code, started)
    return response


async def _record(request: Request, status_code: int, started: float) -> None:
    app: App = request.app.state.app
    entry = RequestLog(
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 3),
        client=request.client.host if request.client else None,
    )
    try:
        await app.record_request(entry)
    except StoreError:
        # The response is already computed; a log store outage must not turn it into an error
        logger.warning("request_log_failed", path=entry.path, exc_info=True)
