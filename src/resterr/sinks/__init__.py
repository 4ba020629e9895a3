"""Response sinks and transport adapters for resterr."""

from .buffered import BufferedResponseSink
from .asgi import ErrorHandlingMiddleware, context_from_request

__all__ = ["BufferedResponseSink", "ErrorHandlingMiddleware", "context_from_request"]
