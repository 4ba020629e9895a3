"""REST error dispatching.

The dispatcher turns an arbitrary exception into exactly one JSON response:

1. a RESTError on the exception's chain is written as is
2. otherwise the registry is searched for a sentinel the exception wraps
3. otherwise the generic 500 descriptor is written

Every dispatch emits one log record naming the path taken. Failures while
writing are logged and swallowed: handling an error must never raise into
the transport layer.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..abstractions import ResponseSink
from ..config import DEFAULT_LOGGER_NAME, DispatcherConfig
from ..registry import ErrorRegistry, Validator, build_registry
from .chain import describe, find_rest_error, safe_str
from .descriptor import CONTENT_TYPE, ErrorDescriptor


class ResolutionKind(Enum):
    """How a dispatched error was translated."""

    DIRECT = "direct"
    MAPPED = "mapped"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving an error to a descriptor.

    Attributes:
        kind: Which resolution path applied
        descriptor: Descriptor to write
        sentinel: Matched registry key, for mapped errors only
    """

    kind: ResolutionKind
    descriptor: ErrorDescriptor
    sentinel: Optional[BaseException] = None


class ErrorContext:
    """Request context threaded through dispatch for log correlation."""

    def __init__(
        self,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        """Initialize error context.

        Args:
            request_id: Optional request identifier
            operation: Optional operation or route being served
        """
        self.request_id = request_id
        self.operation = operation
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_log_fields(self) -> Dict[str, Any]:
        """Return the non-empty context fields as log attributes."""
        fields = {"request_timestamp": self.timestamp}
        if self.request_id:
            fields["request_id"] = self.request_id
        if self.operation:
            fields["operation"] = self.operation
        return fields


def _context_fields(ctx: Optional[ErrorContext]) -> Dict[str, Any]:
    return ctx.to_log_fields() if ctx is not None else {}


class ErrorDispatcher:
    """Logs errors and writes their REST equivalent to a response sink.

    A dispatcher is safe to share between threads: it holds no mutable
    state and its registry is immutable.

    Attributes:
        registry: Registry of known sentinel errors
        logger: Logger receiving one record per dispatch

    Example:
        dispatcher = ErrorDispatcher.from_table(
            {ERR_NOT_FOUND: (404, "resource missing")},
            validator=error_status,
        )
        dispatcher.dispatch(ErrorContext(request_id="r-1"), sink, err)
    """

    def __init__(
        self,
        registry: ErrorRegistry,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    @classmethod
    def from_table(
        cls,
        error_table: Mapping[BaseException, Any],
        validator: Optional[Validator] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "ErrorDispatcher":
        """Build the registry and the dispatcher in one step.

        Raises:
            RegistryConstructionError: If the table is invalid
        """
        return cls(build_registry(error_table, validator), logger)

    @classmethod
    def from_config(
        cls,
        error_table: Mapping[BaseException, Any],
        config: DispatcherConfig,
    ) -> "ErrorDispatcher":
        """Build a dispatcher using the logger and validator named by config."""
        return cls.from_table(
            error_table,
            validator=config.build_validator(),
            logger=logging.getLogger(config.logger_name),
        )

    def resolve(self, err: BaseException) -> Resolution:
        """Decide which descriptor applies to ``err``.

        A RESTError anywhere on the chain takes precedence over registry
        matches, even when the chain also wraps a registered sentinel.
        """
        rest_error = find_rest_error(err)
        if rest_error is not None:
            return Resolution(ResolutionKind.DIRECT, rest_error.descriptor)

        found = self.registry.match(err)
        if found is not None:
            sentinel, descriptor = found
            return Resolution(ResolutionKind.MAPPED, descriptor, sentinel)

        return Resolution(ResolutionKind.FALLBACK, self.registry.generic)

    def dispatch(
        self,
        ctx: Optional[ErrorContext],
        sink: ResponseSink,
        err: BaseException,
    ) -> None:
        """Log ``err`` and write its REST equivalent to ``sink``.

        Never raises. The sink always receives exactly one status and body.
        """
        fields = _context_fields(ctx)

        try:
            resolution = self.resolve(err)
        except Exception as e:
            # chain hooks (unwrap/matches/__eq__) are user code
            self.logger.error(
                "Failed to resolve error.",
                extra={**fields, "error": describe(err), "resolve_error": describe(e)},
            )
            resolution = Resolution(ResolutionKind.FALLBACK, self.registry.generic)

        self._log_resolution(fields, err, resolution)

        try:
            sink.set_header("Content-Type", CONTENT_TYPE)
        except Exception as e:
            self.logger.error(
                "Failed to set content type.",
                extra={**fields, "error": describe(e)},
            )

        self.write(ctx, sink, resolution.descriptor)

    def _log_resolution(
        self, fields: Dict[str, Any], err: BaseException, resolution: Resolution
    ) -> None:
        extra = {
            **fields,
            "error": describe(err),
            "error_type": type(err).__name__,
            "resolution": resolution.kind.value,
        }

        if resolution.kind is ResolutionKind.DIRECT:
            self.logger.info("Handling REST error.", extra=extra)
        elif resolution.kind is ResolutionKind.MAPPED:
            extra["rest_error"] = safe_str(resolution.descriptor)
            self.logger.info("Handling mapped error.", extra=extra)
        else:
            self.logger.error(
                "Handling unmapped error.",
                extra=extra,
                exc_info=(type(err), err, err.__traceback__),
            )

    def write(
        self,
        ctx: Optional[ErrorContext],
        sink: ResponseSink,
        descriptor: ErrorDescriptor,
    ) -> None:
        """Write ``descriptor`` as the response status and JSON body.

        Registry descriptors come with their payload already rendered;
        descriptors taken from a RESTError are serialized here. If that
        fails the generic error is written instead.
        """
        fields = _context_fields(ctx)

        payload = descriptor.serialized
        if payload is None:
            try:
                payload = descriptor.serialize()
            except Exception as e:
                self.logger.error(
                    "Failed to serialize error during write.",
                    extra={**fields, "source_error": safe_str(descriptor), "error": describe(e)},
                )
                self.write_generic(ctx, sink)
                return

        try:
            sink.set_status(descriptor.status_code)
            sink.write(payload)
        except Exception as e:
            self.logger.error(
                "Failed to write JSON error.",
                extra={**fields, "source_error": safe_str(descriptor), "error": describe(e)},
            )

    def write_generic(self, ctx: Optional[ErrorContext], sink: ResponseSink) -> None:
        """Write the pre-rendered generic error. Failures are only logged."""
        generic = self.registry.generic
        try:
            sink.set_status(generic.status_code)
            sink.write(generic.serialized)
        except Exception as e:
            self.logger.error(
                "Failed to write generic JSON error.",
                extra={**_context_fields(ctx), "error": describe(e)},
            )
