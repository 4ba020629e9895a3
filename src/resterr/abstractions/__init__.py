"""Abstraction layer for resterr.

This module provides the interfaces the dispatcher depends on, so that any
transport or error hierarchy can be plugged in.
"""

from .base import ResponseSink, ChainableError

__all__ = [
    "ResponseSink",
    "ChainableError",
]
