"""
Custom middleware for the FastAPI application
"""
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses"""
    async def dispatch(self, request: Request, call_next):
        logger.info("REQUEST: %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
            logger.info("RESPONSE: %s %s -> %s", request.method, request.url.path, response.status_code)
            return response
        except Exception as e:
            logger.error("ERROR in request: %s: %s", type(e).__name__, e)
            raise
