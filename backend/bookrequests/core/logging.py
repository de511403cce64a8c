"""Logging configuration."""

from __future__ import annotations

import linecache
import logging
import sys
import traceback
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict

# Type for exception info tuple (from sys.exc_info())
ExcInfo = tuple[type[BaseException] | None, BaseException | None, TracebackType | None]

# Type for traceback frame information
TracebackFrame = dict[str, str | int | None]

# Type for structured exception details
ExceptionDetails = dict[
    str,
    None | str | list[TracebackFrame],
]

APP_LOG_FILENAME = "bookrequests.json.log"


def format_exception_for_json(
    exc_info: ExcInfo | None,
) -> ExceptionDetails:
    """Format exception information for JSON logging.

    Extracts exception details into a structured format that's easier to read
    in JSON logs than a raw traceback string.

    Args:
        exc_info: Exception info tuple from sys.exc_info() or None

    Returns:
        Dictionary with exception details:
        - exception_type: Exception class name (str or None)
        - exception_message: Exception message (str or None)
        - exception_module: Module where exception occurred (str or None)
        - traceback_frames: List of traceback frames
        - traceback_text: Full traceback as text (for reference)
    """
    if exc_info is None or exc_info == (None, None, None):
        return {}

    exc_type, exc_value, exc_tb = exc_info

    exception_details: ExceptionDetails = {
        "exception_type": exc_type.__name__ if exc_type else None,
        "exception_message": str(exc_value) if exc_value else None,
        "exception_module": exc_type.__module__ if exc_type else None,
    }

    if exc_tb:
        tb_frames: list[TracebackFrame] = []
        current_tb: TracebackType | None = exc_tb

        while current_tb is not None:
            frame = current_tb.tb_frame
            frame_info: TracebackFrame = {
                "filename": frame.f_code.co_filename,
                "lineno": current_tb.tb_lineno,
                "function": frame.f_code.co_name,
            }

            line = linecache.getline(frame.f_code.co_filename, current_tb.tb_lineno)
            if line:
                frame_info["source_line"] = line.strip()

            tb_frames.append(frame_info)
            current_tb = current_tb.tb_next

        exception_details["traceback_frames"] = tb_frames
        exception_details["traceback_text"] = "".join(
            traceback.format_exception(exc_type, exc_value, exc_tb)
        )

    return exception_details


def exception_processor(
    logger: structlog.BoundLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that renders exceptions as structured fields.

    Args:
        logger: Logger instance (structlog BoundLogger)
        method_name: Logging method name
        event_dict: Event dictionary from structlog

    Returns:
        Modified event dictionary with structured exception information
    """
    exc_info = event_dict.pop("exc_info", None)

    # logger.exception() and exc_info=True leave the exception in sys.exc_info()
    if exc_info is True:
        exc_info = sys.exc_info()
    elif isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and exc_info != (None, None, None):
        exception_details = format_exception_for_json(exc_info)  # type: ignore[arg-type]
        if exception_details:
            event_dict["exception"] = exception_details

            exc_type = exception_details.get("exception_type")
            exc_msg = exception_details.get("exception_message")
            if exc_type and exc_msg:
                event_dict["exception_summary"] = f"{exc_type}: {exc_msg}"

    return event_dict


def setup_logging(debug: bool = False, logs_dir: Path | None = None) -> None:
    """Setup structured logging with structlog.

    Logs go to stdout (pretty console output in debug, JSON otherwise), or
    only to a JSON file in ``logs_dir`` when one is given.

    Args:
        debug: Enable debug logging
        logs_dir: Optional directory for log files. If provided, logs will be written to files in JSON format.
    """
    log_level = logging.DEBUG if debug else logging.INFO

    handlers: list[logging.Handler] = []
    app_file_handler: logging.Handler | None = None

    if logs_dir:
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            app_file_handler = logging.FileHandler(logs_dir / APP_LOG_FILENAME, encoding="utf-8")
            app_file_handler.setLevel(log_level)
            handlers.append(app_file_handler)
        except OSError as e:
            # If file logging fails, log to stderr but don't crash
            sys.stderr.write(f"Warning: Failed to setup file logging: {e}\n")

    # If no file logging, fall back to stdout
    if not app_file_handler:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(log_level)
        handlers.append(stdout_handler)

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        exception_processor,
    ]

    # File logs are always JSON; console is pretty only in debug mode
    if app_file_handler or not debug:
        final_processors = processors + [structlog.processors.JSONRenderer()]
    else:
        final_processors = processors + [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=final_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.getLogger().setLevel(log_level)

    logger = structlog.get_logger("bookrequests.logging")
    logger.info(
        "Logging configured",
        level=logging.getLevelName(log_level),
        debug=debug,
        app_file_logging=app_file_handler is not None,
        app_log_file=str(logs_dir / APP_LOG_FILENAME) if app_file_handler and logs_dir else None,
    )


def setup_logging_from_settings() -> None:
    """Configure logging from application settings."""
    from bookrequests.core.config import get_settings

    settings = get_settings()
    setup_logging(
        debug=settings.is_debug,
        logs_dir=settings.logs_dir if settings.log_to_file else None,
    )
