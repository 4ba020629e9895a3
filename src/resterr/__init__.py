"""resterr: translate application errors into JSON REST responses.

Build a dispatcher once at startup from a table of sentinel exceptions,
then hand it every error a request handler produces:

    ERR_NOT_FOUND = LookupError("not found")

    dispatcher = ErrorDispatcher.from_table(
        {ERR_NOT_FOUND: (404, "resource missing")},
        validator=error_status,
    )
    dispatcher.dispatch(ctx, sink, wrap("lookup failed", ERR_NOT_FOUND))
    # 404 {"status-code":404,"message":"resource missing"}
"""

from .errors import (
    CONTENT_TYPE,
    GENERIC_ERROR,
    ErrorDescriptor,
    RESTError,
    WrappedError,
    is_error,
    wrap,
)
from .errors.handlers import (
    ErrorContext,
    ErrorDispatcher,
    Resolution,
    ResolutionKind,
)
from .registry import ErrorRegistry, build_registry
from .config import DispatcherConfig
from .exceptions import (
    ResterrError,
    RegistryConstructionError,
    DescriptorValidationError,
    DescriptorSerializationError,
    SinkError,
)
from .abstractions import ResponseSink, ChainableError
from .sinks import BufferedResponseSink, ErrorHandlingMiddleware
from .validators import (
    all_of,
    error_status,
    known_http_status,
    non_empty_message,
    status_in_range,
)

__version__ = "1.0.0"

__all__ = [
    "CONTENT_TYPE",
    "GENERIC_ERROR",
    "ErrorDescriptor",
    "RESTError",
    "WrappedError",
    "is_error",
    "wrap",
    "ErrorContext",
    "ErrorDispatcher",
    "Resolution",
    "ResolutionKind",
    "ErrorRegistry",
    "build_registry",
    "DispatcherConfig",
    "ResterrError",
    "RegistryConstructionError",
    "DescriptorValidationError",
    "DescriptorSerializationError",
    "SinkError",
    "ResponseSink",
    "ChainableError",
    "BufferedResponseSink",
    "ErrorHandlingMiddleware",
    "all_of",
    "error_status",
    "known_http_status",
    "non_empty_message",
    "status_in_range",
]
