"""Ready-made validation strategies for registry construction.

A validator receives each descriptor of an error table before it is
accepted. It rejects the descriptor by raising (the message becomes the
reason reported by DescriptorValidationError) or by returning False.

Example:
    build_registry(table, validator=all_of(error_status, non_empty_message))
"""

from http import HTTPStatus
from typing import Optional

from ..errors.descriptor import ErrorDescriptor
from ..registry import Validator


def status_in_range(low: int, high: int) -> Validator:
    """Build a validator accepting status codes in ``[low, high]``.

    Raises:
        ValueError: If the range is empty
    """
    if low > high:
        raise ValueError(f"invalid status range: {low} > {high}")

    def validate(descriptor: ErrorDescriptor) -> None:
        if not low <= descriptor.status_code <= high:
            raise ValueError(
                f"status code {descriptor.status_code} is outside [{low}, {high}]"
            )

    validate.__name__ = f"status_in_range_{low}_{high}"
    return validate


# Client and server errors only.
error_status = status_in_range(400, 599)


def known_http_status(descriptor: ErrorDescriptor) -> None:
    """Accept only status codes defined by http.HTTPStatus."""
    try:
        HTTPStatus(descriptor.status_code)
    except ValueError:
        raise ValueError(
            f"status code {descriptor.status_code} is not a standard HTTP status"
        ) from None


def non_empty_message(descriptor: ErrorDescriptor) -> None:
    """Reject blank client messages."""
    if not descriptor.message.strip():
        raise ValueError("message must not be empty")


def all_of(*validators: Validator) -> Validator:
    """Combine validators; the first rejection wins."""

    def validate(descriptor: ErrorDescriptor) -> Optional[bool]:
        for validator in validators:
            if validator(descriptor) is False:
                return False
        return None

    return validate
