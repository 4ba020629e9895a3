"""Error descriptors and chain helpers for resterr.

The dispatcher lives in ``resterr.errors.handlers``; it depends on the
registry, which in turn depends on the modules exported here.
"""

from .descriptor import CONTENT_TYPE, GENERIC_ERROR, ErrorDescriptor, RESTError
from .chain import (
    WrappedError,
    describe,
    find_rest_error,
    is_error,
    iter_chain,
    matches,
    safe_str,
    wrap,
)

__all__ = [
    "CONTENT_TYPE",
    "GENERIC_ERROR",
    "ErrorDescriptor",
    "RESTError",
    "WrappedError",
    "describe",
    "find_rest_error",
    "is_error",
    "iter_chain",
    "matches",
    "safe_str",
    "wrap",
]
