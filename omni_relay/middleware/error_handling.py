import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils.helpers import internal_error

logger = logging.getLogger("OmniRelay.ErrorHandling")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Last line of defence: anything a route failed to map becomes the generic
    500 body. The exception is logged here and never echoed to the caller.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled error on {request.method} {request.url.path}: {type(e).__name__} - {e}",
                exc_info=True,
            )
            return internal_error()
