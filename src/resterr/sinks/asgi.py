"""Starlette integration.

ErrorHandlingMiddleware wraps a Starlette (or FastAPI) application. When a
route raises, the exception is handed to an ErrorDispatcher and the JSON
error it writes becomes the response.

Only exceptions raised before the response starts are translated. Errors
raised while a streaming body is being sent propagate to the server
unchanged.
"""

from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..errors.handlers import ErrorContext, ErrorDispatcher
from .buffered import BufferedResponseSink

ContextFactory = Callable[[Request], Optional[ErrorContext]]


def context_from_request(request: Request) -> ErrorContext:
    """Build the correlation context for an HTTP request."""
    return ErrorContext(
        request_id=request.headers.get("x-request-id"),
        operation=f"{request.method} {request.url.path}",
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Translate exceptions escaping a route into JSON error responses.

    Args:
        app: The ASGI application to wrap
        dispatcher: Dispatcher used to translate exceptions
        context_factory: Builds the log correlation context from the
            request; defaults to context_from_request

    Example:
        app = Starlette(routes=routes)
        app.add_middleware(ErrorHandlingMiddleware, dispatcher=dispatcher)
    """

    def __init__(
        self,
        app: ASGIApp,
        dispatcher: ErrorDispatcher,
        context_factory: Optional[ContextFactory] = None,
    ):
        super().__init__(app)
        self.dispatcher = dispatcher
        self.context_factory = context_factory or context_from_request

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as err:
            sink = BufferedResponseSink()
            self.dispatcher.dispatch(self.context_factory(request), sink, err)
            sink.close()
            return sink.to_response()
