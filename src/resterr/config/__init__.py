from .settings import DEFAULT_LOGGER_NAME, DispatcherConfig, parse_status_range

__all__ = ["DEFAULT_LOGGER_NAME", "DispatcherConfig", "parse_status_range"]
