"""
Simple request timing middleware for FastAPI
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

perf_logger = logging.getLogger("app.performance")

SLOW_REQUEST_MS = 1000
ELEVATED_REQUEST_MS = 500


class SimplePerformanceMiddleware(BaseHTTPMiddleware):
    """요청 처리 시간을 기록하고 X-Process-Time 헤더를 붙인다"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Process-Time"] = f"{duration_ms:.1f}ms"
        self._log_request(f"{request.method} {request.url.path}", duration_ms, response.status_code)

        return response

    def _log_request(self, endpoint: str, duration_ms: float, status_code: int):
        """요청 로깅"""
        if duration_ms > SLOW_REQUEST_MS:
            perf_logger.warning(f"{endpoint} - {duration_ms:.1f}ms - {status_code} [SLOW]")
        elif duration_ms > ELEVATED_REQUEST_MS:
            perf_logger.info(f"{endpoint} - {duration_ms:.1f}ms - {status_code} [ELEVATED]")
        else:
            perf_logger.debug(f"{endpoint} - {duration_ms:.1f}ms - {status_code}")
