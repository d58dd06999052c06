"""Core package containing the logging setup shared by all components."""

from tonpack.core.logging_manager import LoggingManager, get_logger
