import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger("workout_ai.middleware")


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} - {process_time:.2f}ms - {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round(process_time, 2),
                "status_code": response.status_code,
            },
        )
        return response
