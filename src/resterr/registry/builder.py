"""Error registry construction.

The registry associates sentinel exception instances with the descriptors
written when they (or anything wrapping them) reach the dispatcher. It is
built once at startup and is read-only afterwards, so a single registry can
be shared by every request handler without locking.

Construction is all-or-nothing: every template is coerced into a
descriptor, checked by the optional validator and serialized before the
registry exists. Any failure raises RegistryConstructionError and nothing is
returned.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, ItemsView, Iterator, Mapping, Optional, Tuple

from ..errors.chain import iter_chain, matches
from ..errors.descriptor import GENERIC_ERROR, ErrorDescriptor
from ..exceptions import (
    DescriptorSerializationError,
    DescriptorValidationError,
    RegistryConstructionError,
)

logger = logging.getLogger(__name__)

# A validator rejects a descriptor by raising or by returning False.
Validator = Callable[[ErrorDescriptor], Optional[bool]]


class ErrorRegistry:
    """Immutable sentinel -> descriptor mapping.

    Instances are created by build_registry(); every stored descriptor
    carries its serialized payload.

    Attributes:
        generic: The prepared generic (500) descriptor used as fallback
    """

    __slots__ = ("_entries", "_generic")

    def __init__(
        self,
        entries: Mapping[BaseException, ErrorDescriptor],
        generic: ErrorDescriptor,
    ):
        self._entries = MappingProxyType(dict(entries))
        self._generic = generic

    @property
    def generic(self) -> ErrorDescriptor:
        return self._generic

    def get(self, sentinel: BaseException) -> Optional[ErrorDescriptor]:
        """Exact lookup by sentinel, without walking any chain."""
        return self._entries.get(sentinel)

    def match(
        self, err: BaseException
    ) -> Optional[Tuple[BaseException, ErrorDescriptor]]:
        """Find the registered sentinel that ``err`` is or wraps.

        The first matching entry wins. If the chain of ``err`` matches more
        than one registered sentinel, which of them is returned is
        unspecified; tables should not rely on it.

        Returns:
            (sentinel, descriptor) pair, or None if nothing matches
        """
        chain = list(iter_chain(err))
        for sentinel, descriptor in self._entries.items():
            if any(matches(node, sentinel) for node in chain):
                return sentinel, descriptor
        return None

    def lookup(self, err: BaseException) -> Optional[ErrorDescriptor]:
        """Chain-aware lookup returning only the descriptor."""
        found = self.match(err)
        return found[1] if found is not None else None

    def items(self) -> ItemsView[BaseException, ErrorDescriptor]:
        """Registered (sentinel, descriptor) pairs."""
        return self._entries.items()

    def __contains__(self, sentinel: object) -> bool:
        return sentinel in self._entries

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ErrorRegistry(entries={len(self._entries)})"


def coerce_descriptor(template: Any) -> ErrorDescriptor:
    """Turn a table value into an ErrorDescriptor.

    Accepts an ErrorDescriptor, a mapping using either attribute or wire
    names, or a ``(status_code, message)`` pair.

    Raises:
        TypeError: If the template has an unsupported type
        ValueError: If the template does not describe a valid descriptor
    """
    if isinstance(template, ErrorDescriptor):
        return template
    if isinstance(template, Mapping):
        return ErrorDescriptor.model_validate(dict(template))
    if isinstance(template, (tuple, list)) and len(template) == 2:
        status_code, message = template
        return ErrorDescriptor(status_code=status_code, message=message)
    raise TypeError(
        f"unsupported REST error template type: {type(template).__name__}"
    )


def _validate(
    validator: Validator, sentinel: BaseException, descriptor: ErrorDescriptor
) -> None:
    try:
        accepted = validator(descriptor)
    except Exception as e:
        raise DescriptorValidationError(
            f"validation failed for REST error: {e}",
            sentinel=sentinel,
            descriptor=descriptor,
        ) from e
    if accepted is False:
        raise DescriptorValidationError(
            "validation failed for REST error: rejected by validator",
            sentinel=sentinel,
            descriptor=descriptor,
        )


def _prepare(
    descriptor: ErrorDescriptor, sentinel: Optional[BaseException] = None
) -> ErrorDescriptor:
    try:
        return descriptor.prepared()
    except (TypeError, ValueError) as e:
        raise DescriptorSerializationError(
            f"could not serialize REST error: {e}",
            sentinel=sentinel,
            descriptor=descriptor,
        ) from e


def build_registry(
    error_table: Mapping[BaseException, Any],
    validator: Optional[Validator] = None,
) -> ErrorRegistry:
    """Build an immutable registry from a sentinel -> template table.

    Args:
        error_table: Sentinel exception instances mapped to templates
            (see coerce_descriptor for accepted forms). Sentinels must be
            hashable; an exception defining ``__eq__`` without ``__hash__``
            fails with TypeError when the table itself is built.
        validator: Optional strategy applied to every descriptor before it
            is accepted

    Returns:
        ErrorRegistry with every descriptor pre-serialized

    Raises:
        RegistryConstructionError: If a sentinel is not an exception instance
        DescriptorValidationError: If a template is invalid or rejected
        DescriptorSerializationError: If a descriptor cannot be serialized

    Example:
        ERR_NOT_FOUND = LookupError("not found")
        registry = build_registry(
            {ERR_NOT_FOUND: (404, "resource missing")},
            validator=error_status,
        )
    """
    generic = _prepare(GENERIC_ERROR)

    entries = {}
    for sentinel, template in error_table.items():
        if not isinstance(sentinel, BaseException):
            raise RegistryConstructionError(
                "sentinel must be an exception instance, "
                f"got {type(sentinel).__name__}",
                descriptor=template,
            )

        try:
            descriptor = coerce_descriptor(template)
        except (TypeError, ValueError) as e:
            raise DescriptorValidationError(
                f"invalid REST error template: {e}",
                sentinel=sentinel,
                descriptor=template,
            ) from e

        if validator is not None:
            _validate(validator, sentinel, descriptor)

        entries[sentinel] = _prepare(descriptor, sentinel)

    logger.debug("Built error registry", extra={"entries": len(entries)})
    return ErrorRegistry(entries, generic)
