"""
API middlewares.

Maps domain errors to JSON error responses.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from helpnet.utils.exceptions import (
    AuthorizationError,
    ConnectivityError,
    HelpnetError,
    InvalidInputError,
    SyncInProgress,
)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

# First match wins
ERROR_STATUS: tuple[tuple[type[Exception], int], ...] = (
    (InvalidInputError, 400),
    (AuthorizationError, 403),
    (SyncInProgress, 409),
    (ConnectivityError, 503),
)


def status_for(error: Exception) -> int:
    """HTTP status for a domain error (500 when unmapped)."""
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


def error_response(message: str, status: int) -> web.Response:
    """Structured error body."""
    return web.json_response(
        {"error": message, "status_code": status}, status=status
    )


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Convert raised errors into JSON responses."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except HelpnetError as e:
        status = status_for(e)
        if status >= 500:
            logger.error(f"[API] {request.method} {request.path} failed: {e}")
        else:
            logger.warning(f"[API] {request.method} {request.path} rejected: {e}")
        return error_response(str(e), status)
    except Exception as e:
        logger.exception(
            f"[API] Unhandled error on {request.method} {request.path}: {e}"
        )
        return error_response("Internal server error", 500)
