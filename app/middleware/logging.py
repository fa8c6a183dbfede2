import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.request_context import HDR_REQUEST_ID, get_request_context

logger = logging.getLogger("access")

class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log line on the way in and out, tagged with the request id"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        context = get_request_context(request)
        request_id = context["request_id"]

        logger.info(
            f"🌐 [{request_id}] {context['endpoint']} - "
            f"Client: {context['ip_address'] or 'unknown'} - "
            f"User-Agent: {context['user_agent'] or 'unknown'}"
        )

        response = await call_next(request)
        elapsed = time.time() - start_time

        logger.info(f"✅ [{request_id}] {context['endpoint']} - Status: {response.status_code} - Time: {elapsed:.4f}s")

        response.headers["X-Process-Time"] = str(elapsed)
        response.headers[HDR_REQUEST_ID] = request_id
        return response
