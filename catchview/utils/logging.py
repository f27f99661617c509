"""Logging utility for catchview"""

import json
import logging
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, MutableMapping, Optional

from rich.logging import RichHandler

from .paths import LOGS_DIR

ROOT_LOGGER_NAME = "catchview"

_LOG_DIR: Optional[Path] = None


def _get_log_dir() -> Path:
    """Get log directory, creating it on first access."""

    from .errors import FileSystemError

    global _LOG_DIR

    if _LOG_DIR is None:
        _LOG_DIR = LOGS_DIR
        try:
            _LOG_DIR.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(f"Failed to create log directory: {_LOG_DIR}") from e

    return _LOG_DIR


## Custom JSON Formatter


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for log records."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "event_type"):
            log_entry["event_type"] = record.event_type

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        return json.dumps(log_entry, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter to add contextual information."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        if "extra" not in kwargs:
            kwargs["extra"] = {}

        kwargs["extra"].update(self.extra)
        return msg, kwargs


## Main Log Manager


class LogManager:
    """Manages logging configuration and provides logger instances.

    The console handler writes to the terminal, so it is left off while the
    TUI is running and only the rotating files receive records.
    """

    def __init__(
        self,
        log_level: str = "INFO",
        console: bool = True,
        max_file_size: int = 5_242_880,
        backup_count: int = 5,
    ):
        self.log_level = getattr(logging, log_level.upper())
        self.console = console
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.root_logger.setLevel(logging.DEBUG)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Setup console and file handlers."""

        from .errors import CatchViewError, FileSystemError

        try:
            for handler in list(self.root_logger.handlers):
                handler.close()
            self.root_logger.handlers.clear()

            if self.console:
                console_handler = RichHandler(
                    show_time=True,
                    show_path=False,
                    markup=False,
                    rich_tracebacks=True,
                )
                console_handler.setLevel(logging.WARNING)
                console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
                self.root_logger.addHandler(console_handler)

            log_dir = _get_log_dir()

            try:
                app_handler = RotatingFileHandler(
                    log_dir / "app.log",
                    maxBytes=self.max_file_size,
                    backupCount=self.backup_count,
                    encoding="utf-8",
                )
                event_handler = RotatingFileHandler(
                    log_dir / "events.log",
                    maxBytes=2_048_000,
                    backupCount=3,
                    encoding="utf-8",
                )
            except OSError as e:
                raise FileSystemError(f"Failed to create log file handlers: {str(e)}") from e

            app_handler.setLevel(self.log_level)
            app_handler.setFormatter(JSONFormatter())

            event_handler.setLevel(logging.INFO)
            event_handler.setFormatter(JSONFormatter())
            event_handler.addFilter(lambda record: hasattr(record, "event_type"))

            self.root_logger.addHandler(app_handler)
            self.root_logger.addHandler(event_handler)

        except CatchViewError:
            raise

        except Exception as e:
            raise FileSystemError(f"Failed to setup logging handlers: {str(e)}") from e

    def get_logger(
        self, name: Optional[str] = None, **context
    ) -> logging.Logger | ContextAdapter:
        """Get a logger, wrapped in a ContextAdapter when context is given."""

        if not name:
            logger = self.root_logger
        elif name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
            logger = logging.getLogger(name)
        else:
            logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

        if context:
            return ContextAdapter(logger, context)

        return logger

    def log_event(self, event_type: str, message: str, level: str = "INFO", **extra):
        """Log an event with specific type and extra context."""

        try:
            log_level = getattr(logging, level.upper())
        except AttributeError as e:
            raise ValueError(f"Invalid logging level: {level}") from e

        self.root_logger.log(
            log_level, message, extra={"event_type": event_type, "context": extra}
        )


## Decorators for Logging


def async_log_call(func):
    """Async decorator to log coroutine entry, exit and duration."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        func_name = f"{func.__module__}.{func.__qualname__}"
        logger.debug(f"-> Entering {func_name} (async)")
        start_time = datetime.now()

        try:
            result = await func(*args, **kwargs)
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"<- Exiting {func_name} (Duration: {duration:.3f}s)")
            return result

        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"<- Error in {func_name} after {duration:.3f}s: {e}")
            raise

    return wrapper


## Module-level LogManager Instance and Helper Functions

_log_manager: Optional[LogManager] = None


def init_logging(log_level: str = "INFO", console: bool = True, **options) -> LogManager:
    """Initialize logging system and return LogManager instance.

    Calling again with different options rebuilds the handlers, which is how
    the TUI switches the console handler off before taking over the terminal.
    """

    global _log_manager

    if _log_manager is None:
        _log_manager = LogManager(log_level, console=console, **options)
    elif (
        _log_manager.console != console
        or _log_manager.log_level != getattr(logging, log_level.upper())
    ):
        _log_manager = LogManager(log_level, console=console, **options)

    return _log_manager


def get_logger(
    name: Optional[str] = None, **context
) -> logging.Logger | ContextAdapter:
    """Get a logger instance with optional context."""

    global _log_manager
    if _log_manager is None:
        _log_manager = init_logging()

    return _log_manager.get_logger(name, **context)


def log_event(event_type: str, message: str, **extra):
    """Log an event with specific type and extra context (module-level wrapper)."""

    global _log_manager
    if _log_manager is None:
        _log_manager = init_logging()

    return _log_manager.log_event(event_type, message, **extra)
