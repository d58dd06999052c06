from __future__ import annotations

import logging
import logging.handlers
import os
import pathlib
import sys
from typing import Any, Dict, List, Optional, TextIO

import structlog
from pythonjsonlogger import jsonlogger


def get_logger(name: str) -> Any:
    """Get a structured logger for a component.

    Args:
        name: The name of the component requesting a logger.

    Returns:
        A structlog logger. Output follows whatever configuration the
        LoggingManager has installed.
    """
    return structlog.get_logger(name)


class LoggingManager:
    """Configures logging for a packaging run.

    Python's logging module carries the handlers (console and optionally a
    rotating file); structlog sits on top so that components can log events
    with key/value context.
    """

    # Mapping from string log levels to logging module constants
    LOG_LEVELS = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    def __init__(self, settings: Optional[Dict[str, Any]] = None, stream: Optional[TextIO] = None) -> None:
        """Initialize the Logging Manager.

        Args:
            settings: Logging section of the build configuration.
            stream: Stream for the console handler, stdout by default.
        """
        self._settings = settings or {}
        self._stream = stream
        self._root_logger: Optional[logging.Logger] = None
        self._console_handler: Optional[logging.Handler] = None
        self._file_handler: Optional[logging.Handler] = None
        self._handlers: List[logging.Handler] = []
        self._initialized = False

    @property
    def log_format(self) -> str:
        return str(self._settings.get("format", "text")).lower()

    @property
    def level(self) -> int:
        return self.LOG_LEVELS.get(str(self._settings.get("level", "INFO")).lower(), logging.INFO)

    def initialize(self) -> None:
        """Install handlers on the root logger and configure structlog."""
        self._root_logger = logging.getLogger()
        self._root_logger.setLevel(self.level)

        # Remove any existing handlers
        for handler in list(self._root_logger.handlers):
            self._root_logger.removeHandler(handler)

        formatter = self._create_formatter()

        if self._settings.get("console", {}).get("enabled", True):
            self._console_handler = logging.StreamHandler(self._stream or sys.stdout)
            self._console_handler.setLevel(self.level)
            self._console_handler.setFormatter(formatter)
            self._root_logger.addHandler(self._console_handler)
            self._handlers.append(self._console_handler)

        file_settings = self._settings.get("file", {})
        if file_settings.get("enabled", False):
            file_path = pathlib.Path(file_settings.get("path", "logs/tonpack.log"))
            os.makedirs(file_path.parent, exist_ok=True)
            self._file_handler = logging.handlers.RotatingFileHandler(
                file_path,
                maxBytes=int(file_settings.get("max_bytes", 10 * 1024 * 1024)),
                backupCount=int(file_settings.get("backup_count", 5)),
            )
            self._file_handler.setLevel(self.level)
            self._file_handler.setFormatter(formatter)
            self._root_logger.addHandler(self._file_handler)
            self._handlers.append(self._file_handler)

        self._configure_structlog()
        self._initialized = True

    def _create_formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return jsonlogger.JsonFormatter(
                fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
                json_ensure_ascii=False,
            )
        return structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            ],
        )

    def _configure_structlog(self) -> None:
        """Configure structlog for structured logging."""
        processors: List[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
        if self.log_format == "json":
            # JsonFormatter emits context passed as logging "extra"
            processors.append(structlog.stdlib.render_to_log_kwargs)
        else:
            processors[1:1] = [
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            ]
            processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

        structlog.configure(
            processors=processors,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )

    def shutdown(self) -> None:
        """Detach and close the handlers this manager installed."""
        if self._root_logger:
            for handler in self._handlers:
                self._root_logger.removeHandler(handler)
                handler.close()
        self._handlers = []
        self._console_handler = None
        self._file_handler = None
        self._initialized = False
