# backend/market_sum/middleware/request_logger.py
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from market_sum.logger import get_logger

log = get_logger(__name__)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """One log line per request; elapsed time is also echoed in X-Process-Time-Ms."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        try:
            response = await call_next(request)
        except Exception:
            ms = int((time.perf_counter() - start) * 1000)
            log.error("%s %s -> 500 %dms (%s)", request.method, path, ms, client)
            raise

        ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Process-Time-Ms"] = str(ms)
        level = log.warning if response.status_code >= 400 else log.info
        level("%s %s -> %s %dms (%s)", request.method, path, response.status_code, ms, client)
        return response
