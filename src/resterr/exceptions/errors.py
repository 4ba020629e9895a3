"""Custom exceptions for resterr.

This module defines the hierarchy of exceptions raised by the library
itself. All of them inherit from ResterrError, allowing for both specific
and general exception handling.

The hierarchy is deliberately small:
- RegistryConstructionError: the error table could not be turned into a
  registry (raised at startup, never while serving requests)
- SinkError: a built-in response sink was used incorrectly

Errors that happen while a request is being translated are never raised to
the caller; the dispatcher logs them and degrades to the generic response.
"""

from typing import Any, Optional


class ResterrError(Exception):
    """Base exception for all resterr errors.

    Example:
        try:
            registry = build_registry(table)
        except ResterrError as e:
            sys.exit(f"invalid error table: {e}")
    """
    pass


class RegistryConstructionError(ResterrError):
    """Raised when an error registry cannot be built.

    Construction is atomic: when this is raised no registry exists, and
    nothing built so far is retained.

    Attributes:
        sentinel: The table key whose entry failed, if known
        descriptor: The offending template or descriptor, if known
        reason: Human readable explanation of the failure
    """

    def __init__(
        self,
        reason: str,
        sentinel: Optional[BaseException] = None,
        descriptor: Optional[Any] = None,
    ):
        self.reason = reason
        self.sentinel = sentinel
        self.descriptor = descriptor
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.reason]
        if self.descriptor is not None:
            parts.append(f"descriptor: {self.descriptor}")
        if self.sentinel is not None:
            parts.append(f"sentinel: {self.sentinel!r}")
        return "; ".join(parts)


class DescriptorValidationError(RegistryConstructionError):
    """Raised when a template is rejected during registry construction.

    This covers both templates that are not valid descriptors at all
    (wrong types, missing fields) and descriptors refused by the
    caller-supplied validator. The validator's own exception, if any, is
    available as ``__cause__``.

    Example:
        build_registry({ERR: (399, "nope")}, validator=error_status)
        # DescriptorValidationError: validation failed for REST error: ...
    """
    pass


class DescriptorSerializationError(RegistryConstructionError):
    """Raised when a descriptor cannot be serialized to its wire form."""
    pass


class SinkError(ResterrError):
    """Raised when a built-in response sink is misused.

    Example:
        sink.close()
        sink.write(b"late")  # SinkError: response sink is closed
    """
    pass
