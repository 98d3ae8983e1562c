"""
Request timing middleware
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, device_id, duration and status for every request
    and reports the duration to the client in X-Response-Time-Ms
    """
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        device_id = request.headers.get('X-Device-ID', 'missing')

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers['X-Response-Time-Ms'] = f"{duration_ms:.2f}"
        logger.info(
            f"[TIMING] {request.method} {request.url.path} | device_id={device_id} "
            f"| duration={duration_ms:.2f}ms | status={response.status_code}"
        )

        return response
