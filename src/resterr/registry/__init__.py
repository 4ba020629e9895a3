"""Sentinel error registry for resterr."""

from .builder import ErrorRegistry, Validator, build_registry, coerce_descriptor

__all__ = ["ErrorRegistry", "Validator", "build_registry", "coerce_descriptor"]
