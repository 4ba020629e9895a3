"""Configuration management for resterr.

This module provides configuration handling for the error dispatcher,
supporting both environment variable and programmatic configuration.

The configuration system supports multiple deployment scenarios:
- Local development with .env files
- Container deployments with environment variables
- Programmatic configuration for testing
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

from ..registry import Validator
from ..validators import status_in_range

DEFAULT_LOGGER_NAME = "resterr.handler"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_level(name: str, value: str) -> str:
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name, got {value!r}")
    return level


def parse_status_range(value: str) -> Optional[Tuple[int, int]]:
    """Parse a ``low-high`` status range; an empty string means no range.

    Raises:
        ValueError: If the value is not two integers separated by '-'
    """
    value = value.strip()
    if not value:
        return None
    low, sep, high = value.partition("-")
    if not sep:
        raise ValueError(f"status range must look like 'low-high', got {value!r}")
    try:
        bounds = (int(low), int(high))
    except ValueError:
        raise ValueError(
            f"status range bounds must be integers, got {value!r}"
        ) from None
    if bounds[0] > bounds[1]:
        raise ValueError(f"status range is empty: {value!r}")
    return bounds


@dataclass(frozen=True)
class DispatcherConfig:
    """Configuration container for the error dispatcher.

    Attributes:
        logger_name (str): Logger the dispatcher writes its records to
        log_level (str): Level applied by configure_logging()
        log_json (bool): Emit JSON log lines instead of text
        status_range (Optional[Tuple[int, int]]): If set, registry
            construction rejects descriptors outside this inclusive range

    Example:
        # From environment variables
        config = DispatcherConfig.from_env()

        # From parameters
        config = DispatcherConfig.from_params(status_range=(400, 599))
    """

    logger_name: str = DEFAULT_LOGGER_NAME
    log_level: str = "INFO"
    log_json: bool = False
    status_range: Optional[Tuple[int, int]] = None

    @classmethod
    def from_env(
        cls, dotenv_path: Optional[Union[str, os.PathLike]] = None
    ) -> "DispatcherConfig":
        """Create configuration from environment variables.

        A ``.env`` file is loaded first when present; variables already set
        in the environment win over it.

        Optional Environment Variables:
            RESTERR_LOGGER_NAME: Dispatcher logger name
            RESTERR_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            RESTERR_LOG_JSON: true/false
            RESTERR_STATUS_RANGE: e.g. "400-599"

        Raises:
            ValueError: If a variable holds an invalid value
        """
        load_dotenv(dotenv_path)

        try:
            status_range = parse_status_range(os.getenv("RESTERR_STATUS_RANGE", ""))
        except ValueError as e:
            raise ValueError(f"RESTERR_STATUS_RANGE: {e}") from None

        return cls(
            logger_name=os.getenv("RESTERR_LOGGER_NAME", DEFAULT_LOGGER_NAME),
            log_level=_parse_level(
                "RESTERR_LOG_LEVEL", os.getenv("RESTERR_LOG_LEVEL", "INFO")
            ),
            log_json=_parse_bool(
                "RESTERR_LOG_JSON", os.getenv("RESTERR_LOG_JSON", "false")
            ),
            status_range=status_range,
        )

    @classmethod
    def from_params(
        cls,
        logger_name: Optional[str] = None,
        log_level: str = "INFO",
        log_json: bool = False,
        status_range: Optional[Tuple[int, int]] = None,
    ) -> "DispatcherConfig":
        """Create configuration from explicit parameters.

        Raises:
            ValueError: If log_level or status_range is invalid
        """
        if status_range is not None and status_range[0] > status_range[1]:
            raise ValueError(f"status range is empty: {status_range!r}")
        return cls(
            logger_name=logger_name or DEFAULT_LOGGER_NAME,
            log_level=_parse_level("log_level", log_level),
            log_json=log_json,
            status_range=status_range,
        )

    def build_validator(self) -> Optional[Validator]:
        """Validator implied by this configuration, if any."""
        if self.status_range is None:
            return None
        return status_in_range(*self.status_range)
