"""API middleware."""

from bizdesk.api.middleware.error_handler import ErrorHandlerMiddleware
from bizdesk.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
