"""Shared utilities for resterr."""

from .logging_setup import JsonFormatter, TextFormatter, configure_logging, record_extras

__all__ = ["JsonFormatter", "TextFormatter", "configure_logging", "record_extras"]
