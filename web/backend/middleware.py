"""Request id propagation and access logging."""

import re
import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Accept client ids that are safe to echo into headers and logs
_CLIENT_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,128}")


def generate_request_id() -> str:
    """32 hex chars."""
    return uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id, echoes it, and logs start/finish."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER, "")
        if not _CLIENT_ID_RE.fullmatch(request_id):
            request_id = generate_request_id()
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else "-"
        start = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            logger.info(f"{request.method} {request.url.path} started (client={client_ip})")
            response = await call_next(request)

            latency_ms = (time.perf_counter() - start) * 1000
            message = (
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({latency_ms:.1f}ms)"
            )
            if response.status_code >= 500:
                logger.error(message)
            elif response.status_code >= 400:
                logger.warning(message)
            else:
                logger.info(message)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
