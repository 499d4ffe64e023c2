"""
Structured logging for hookfile.

Hook log records travel through a ``HookLogSink``. The default sink forwards
them to the stdlib ``hookfile.hooks`` logger with the record attached as
``extra`` so the console formatter can tag each line with its hook and
origin.
"""

import logging
import sys
from typing import Any, Optional, Protocol

HOOK_LOGGER_NAME = "hookfile.hooks"


class HookLogSink(Protocol):
    """Destination for records emitted by hooks."""

    def debug(self, record: dict[str, Any]) -> None: ...

    def info(self, record: dict[str, Any]) -> None: ...

    def warn(self, record: dict[str, Any]) -> None: ...


class LoggingHookSink:
    """Sink that writes hook records to a stdlib logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(HOOK_LOGGER_NAME)

    def _emit(self, level: int, record: dict[str, Any]) -> None:
        self.logger.log(level, record.get("message", ""), extra={"extra": dict(record)})

    def debug(self, record: dict[str, Any]) -> None:
        self._emit(logging.DEBUG, record)

    def info(self, record: dict[str, Any]) -> None:
        self._emit(logging.INFO, record)

    def warn(self, record: dict[str, Any]) -> None:
        self._emit(logging.WARNING, record)


class HookRecordFormatter(logging.Formatter):
    """Prefix hook records with the hook name and the hookfile they came from."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra = getattr(record, "extra", None)
        if not isinstance(extra, dict) or "hook" not in extra:
            return message
        origin = extra.get("from")
        tag = f"[{extra['hook']}]" if not origin else f"[{extra['hook']} from {origin}]"
        return f"{tag} {message}"


# Process-wide hook sink
_hook_sink: HookLogSink = LoggingHookSink()


def get_hook_sink() -> HookLogSink:
    """Get the process-wide hook sink."""
    return _hook_sink


def set_hook_sink(sink: HookLogSink) -> HookLogSink:
    """Replace the process-wide hook sink, returning the previous one."""
    global _hook_sink
    previous = _hook_sink
    _hook_sink = sink
    return previous


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    hook_level: Optional[str] = None,
) -> None:
    """Set up logging configuration.

    ``hook_level`` applies to the ``hookfile.hooks`` logger only, so
    ``context.log`` output from hookfiles (emitted at DEBUG) is visible
    without turning on debug logging for everything else.
    """
    from hookfile.config import get_settings

    settings = get_settings()

    log_level = getattr(logging, (level or settings.log_level).upper())
    hook_log_level = getattr(logging, (hook_level or settings.hook_log_level).upper())
    log_format = format_string or settings.log_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Level filtering happens on the loggers; the handler passes everything through
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(HookRecordFormatter(log_format))
    root_logger.addHandler(console_handler)

    logging.getLogger(HOOK_LOGGER_NAME).setLevel(hook_log_level)
