"""
phsettings Logging System
Thin wrapper over the standard logging module with support for:
- A TRACE level below DEBUG for following resolution step by step
- Coloured level names on a terminal
- key=value context appended to messages
- Phase helpers for layout parsing, item lookups and placeholder resolution
"""
from __future__ import annotations
import logging
import sys
from typing import Any, Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_COLORS = {
    TRACE: "2",
    logging.DEBUG: "34",
    logging.INFO: "36",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "1;31",
}


class LevelFormatter(logging.Formatter):
    """Colours only the level name, and only when writing to a terminal."""

    def __init__(self, fmt: str, stream=None):
        super().__init__(fmt)
        stream = stream if stream is not None else sys.stderr
        self.color = hasattr(stream, "isatty") and stream.isatty()

    def formatMessage(self, record: logging.LogRecord) -> str:
        if not self.color:
            return super().formatMessage(record)
        tinted = logging.makeLogRecord(record.__dict__)
        code = _LEVEL_COLORS.get(record.levelno, "0")
        tinted.levelname = f"\033[{code}m{record.levelname}\033[0m"
        return super().formatMessage(tinted)


class PhSettingsLogger:
    """
    Logger for phsettings with phase-specific helpers.
    Usage:
        logger = PhSettingsLogger("phsettings.pipeline")
        logger.resolve("Matched definition", key="main", md="{...}")
        logger.lookup("Item not found", identifier="/sitecore/layout/x")
        logger.layout("Parsed device", device="{...}", placeholders=2)
    """

    def __init__(self, name: str = "phsettings", level: int = None):
        self.logger = logging.getLogger(name)
        self._setup_handler()
        if level is not None:
            self.set_level(level)

    def _setup_handler(self):
        """Attach a stderr handler to the package root logger only once."""
        root = logging.getLogger("phsettings")
        if not root.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(LevelFormatter("[%(name)s] %(levelname)s: %(message)s", sys.stderr))
            root.addHandler(handler)
            root.setLevel(logging.INFO)

    def set_level(self, level: int | str):
        """Set the logging level."""
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO
        self.logger.setLevel(level)

    def _format_context(self, context: dict[str, Any]) -> str:
        if not context:
            return ""
        parts = [f"{k}={v!r}" for k, v in context.items()]
        return " | " + ", ".join(parts)

    def trace(self, msg: str, **context):
        """Extremely verbose logging for following resolution internals."""
        if self.logger.isEnabledFor(TRACE):
            self.logger.log(TRACE, msg + self._format_context(context))

    def debug(self, msg: str, **context):
        self.logger.debug(msg + self._format_context(context))

    def info(self, msg: str, **context):
        self.logger.info(msg + self._format_context(context))

    def warning(self, msg: str, **context):
        self.logger.warning(msg + self._format_context(context))

    def error(self, msg: str, **context):
        self.logger.error(msg + self._format_context(context))

    def critical(self, msg: str, **context):
        self.logger.critical(msg + self._format_context(context))

    def layout(self, action: str, **context):
        """Log layout parsing activity."""
        self.trace(f"[LAYOUT] {action}", **context)

    def lookup(self, action: str, **context):
        """Log item database and cache lookups."""
        self.debug(f"[LOOKUP] {action}", **context)

    def resolve(self, action: str, **context):
        """Log placeholder resolution decisions."""
        self.debug(f"[RESOLVE] {action}", **context)


_global_logger: Optional[PhSettingsLogger] = None


def get_logger(name: str = "phsettings") -> PhSettingsLogger:
    """Get or create a logger instance."""
    global _global_logger
    if name == "phsettings" and _global_logger is not None:
        return _global_logger
    logger = PhSettingsLogger(name)
    if name == "phsettings":
        _global_logger = logger
    return logger


def set_log_level(level: int | str):
    """Set the package-wide log level."""
    get_logger().set_level(level)


log = get_logger()
