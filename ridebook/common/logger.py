# ridebook/common/logger.py
"""
Logging for the whole process.

Every logger writes to stdout (JSON or colored text) and, when LOG_TO_FILE is
on, to two size-rotated files shared by all loggers: the main log and an
error-only log. The async ``log_*`` helpers tag each record with the function,
module, file and line that called them.
"""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from ridebook.common.constants import APP_LOGGER_NAME, TypeMsg

_GLOBAL_FILE_HANDLER: logging.Handler | None = None
_GLOBAL_ERROR_HANDLER: logging.Handler | None = None

_LOGGING_INITIALIZED: bool = False

_DEFAULT_OPTIONS: dict[str, Any] = {
    "level": "DEBUG",
    "format": "colored",
    "to_file": False,
    "file_path": "logs/app.log",
    "max_bytes": 10 * 1024 * 1024,
}

_LEVELS: dict[TypeMsg, int] = {
    TypeMsg.DEBUG: logging.DEBUG,
    TypeMsg.INFO: logging.INFO,
    TypeMsg.WARNING: logging.WARNING,
    TypeMsg.ERROR: logging.ERROR,
    TypeMsg.CRITICAL: logging.CRITICAL,
}

# Libraries that are too chatty below WARNING
_QUIET_LOGGERS = ("asyncpg", "multipart", "httpx")

_loggers: dict[str, logging.Logger] = {}


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = extra_data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    GRAY = "\033[90m"

    def _origin(self, record: logging.LogRecord) -> str:
        data = getattr(record, "extra_data", None) or {}
        if not data.get("caller_function"):
            return ""
        return (
            f" {self.GRAY}[{data.get('caller_module')}.{data['caller_function']}() "
            f"{data.get('caller_file')}:{data.get('caller_line')}]{self.RESET}"
        )

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.GRAY)
        stamp = _record_time(record).astimezone().strftime("%Y-%m-%d %H:%M:%S")
        line = f"{stamp} {color}[{record.levelname}]{self.RESET}{self._origin(record)} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class DateBasedRotatingFileHandler(RotatingFileHandler):
    """
    Always writes to ``<log_dir>/<logger_name>.log``. When the file reaches
    ``max_bytes`` it is moved aside as ``<logger_name>_<timestamp>.log`` and a
    new one is started; ``max_bytes <= 0`` disables rotation.
    """

    def __init__(self, log_dir: str, max_bytes: int, logger_name: str = "app", encoding: str = "utf-8"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.logger_name = logger_name
        super().__init__(
            filename=str(self.log_dir / f"{logger_name}.log"),
            maxBytes=max_bytes,
            backupCount=0,
            encoding=encoding,
        )

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if self.maxBytes <= 0:
            return False
        if self.stream is None:
            self.stream = self._open()
        self.stream.seek(0, os.SEEK_END)
        return self.stream.tell() >= self.maxBytes

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        archive = self.log_dir / f"{self.logger_name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        try:
            os.replace(self.baseFilename, archive)
        except FileNotFoundError:
            pass

        self.stream = self._open()


def _logging_options() -> dict[str, Any]:
    """Logging options from settings; defaults when settings cannot be loaded."""
    options = dict(_DEFAULT_OPTIONS)
    try:
        from ridebook.config import settings
    except Exception:
        return options

    section = getattr(settings, "logging", None)
    # Tests patch the section with mocks, so only take values of the right type
    for key, attr, kind in (
        ("level", "LOG_LEVEL", str),
        ("format", "LOG_FORMAT", str),
        ("file_path", "LOG_FILE_PATH", str),
        ("to_file", "LOG_TO_FILE", bool),
        ("max_bytes", "LOG_MAX_BYTES", int),
    ):
        value = getattr(section, attr, None)
        if isinstance(value, kind):
            options[key] = value
    return options


def _make_formatter(log_format: str) -> logging.Formatter:
    return JsonFormatter() if log_format == "json" else ColoredFormatter()


def _shared_file_handlers(options: dict[str, Any]) -> tuple[logging.Handler, logging.Handler]:
    global _GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER

    log_path = Path(options["file_path"])
    if _GLOBAL_FILE_HANDLER is None:
        _GLOBAL_FILE_HANDLER = DateBasedRotatingFileHandler(
            log_dir=str(log_path.parent),
            max_bytes=options["max_bytes"],
            logger_name=log_path.stem,
        )
        _GLOBAL_FILE_HANDLER.setFormatter(_make_formatter(options["format"]))

    if _GLOBAL_ERROR_HANDLER is None:
        _GLOBAL_ERROR_HANDLER = DateBasedRotatingFileHandler(
            log_dir=str(log_path.parent),
            max_bytes=options["max_bytes"],
            logger_name="error",
        )
        _GLOBAL_ERROR_HANDLER.setLevel(logging.ERROR)
        _GLOBAL_ERROR_HANDLER.setFormatter(_make_formatter(options["format"]))

    return _GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """Returns the named logger, configuring it on first use."""
    cached = _loggers.get(name)
    if cached is not None:
        return cached

    options = _logging_options()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options["level"].upper(), logging.DEBUG))

    if not logger.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(_make_formatter(options["format"]))
        logger.addHandler(console)
        if options["to_file"]:
            for handler in _shared_file_handlers(options):
                logger.addHandler(handler)
        logger.propagate = False

    _loggers[name] = logger
    return logger


def setup_logging() -> None:
    """Configures the application logger and library log levels once per process."""
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED:
        return
    _LOGGING_INITIALIZED = True

    get_logger(APP_LOGGER_NAME)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


def _get_caller_info() -> dict[str, Any]:
    """Location of the first frame outside this module, or {} if there is none."""
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code.co_filename == __file__:
            frame = frame.f_back
        if frame is None:
            return {}
        return {
            "caller_function": frame.f_code.co_name,
            "caller_module": frame.f_globals.get("__name__", "unknown"),
            "caller_file": Path(frame.f_code.co_filename).name,
            "caller_line": frame.f_lineno,
        }
    finally:
        del frame


def _emit(
    level: int,
    message: str,
    logger_name: str,
    extra: dict[str, Any] | None,
    exc_info: bool = False,
) -> None:
    logger = get_logger(logger_name)
    data = {**_get_caller_info(), **(extra or {})}
    logger.log(level, message, extra={"extra_data": data}, exc_info=exc_info)


async def log_info(
    message: str,
    *,
    type_msg: TypeMsg = TypeMsg.INFO,
    logger_name: str = APP_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Logs ``message`` at the level named by ``type_msg``.

    ``extra`` is merged into the record's structured fields next to the
    caller location.
    """
    _emit(_LEVELS.get(type_msg, logging.INFO), message, logger_name, extra)


async def log_debug(
    message: str,
    logger_name: str = APP_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    _emit(logging.DEBUG, message, logger_name, extra)


async def log_warning(
    message: str,
    logger_name: str = APP_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    _emit(logging.WARNING, message, logger_name, extra)


async def log_error(
    message: str,
    logger_name: str = APP_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """Logs at ERROR; ``exc_info=True`` attaches the active traceback."""
    _emit(logging.ERROR, message, logger_name, extra, exc_info=exc_info)
