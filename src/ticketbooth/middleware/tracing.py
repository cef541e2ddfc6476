"""
Request tracing middleware
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ticketbooth.core.logging_config import generate_trace_id, set_trace_id
from ticketbooth.core.metrics import http_request_duration_seconds, http_requests_total

logger = logging.getLogger(__name__)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add trace ID and HTTP metrics to all requests"""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get('X-Trace-ID') or generate_trace_id()
        set_trace_id(trace_id)

        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            endpoint = self._endpoint(request)
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={'duration_ms': round(duration_ms, 2), 'error': str(e)},
                exc_info=True,
            )
            http_requests_total.labels(
                method=request.method, endpoint=endpoint, status=500
            ).inc()
            raise

        duration = time.time() - start_time
        endpoint = self._endpoint(request)

        logger.info(
            f"Request completed: {request.method} {request.url.path} {response.status_code}",
            extra={'duration_ms': round(duration * 1000, 2)},
        )
        http_requests_total.labels(
            method=request.method, endpoint=endpoint, status=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(duration)

        response.headers['X-Trace-ID'] = trace_id
        return response

    @staticmethod
    def _endpoint(request: Request) -> str:
        """Route template once routing ran, so path ids do not become label values"""
        return getattr(request.scope.get('route'), 'path', request.url.path)
