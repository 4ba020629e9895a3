"""Validation strategies for resterr error tables."""

from .status_validators import (
    all_of,
    error_status,
    known_http_status,
    non_empty_message,
    status_in_range,
)

__all__ = [
    "all_of",
    "error_status",
    "known_http_status",
    "non_empty_message",
    "status_in_range",
]
