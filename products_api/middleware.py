# products_api/middleware.py

"""
HTTP middleware: the trusted-origin check and the per-request access log.
"""
import logging
import time
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

ORIGIN_REJECTED = "conexion no permitida"


def origin_allowed(origin: Optional[str], trusted_origin: Optional[str]) -> bool:
    """Requests without an Origin header (curl, server-to-server) are always allowed."""
    return not origin or origin == trusted_origin


def trusted_origin_middleware(trusted_origin: Optional[str]):
    """Builds an http middleware that rejects any browser origin except `trusted_origin`."""

    async def check_origin(request: Request, call_next):
        origin = request.headers.get("origin")
        if not origin_allowed(origin, trusted_origin):
            logger.warning(f"Rejected {request.method} {request.url.path} from origin {origin}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": ORIGIN_REJECTED},
            )
        return await call_next(request)

    return check_origin


async def log_requests(request: Request, call_next):
    """Logs one line per request: method, path, status, elapsed time and body size."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    content_length = response.headers.get("content-length", "-")
    logger.info(
        f"{request.method} {path} {response.status_code} {elapsed_ms:.3f} ms - {content_length}"
    )
    return response
