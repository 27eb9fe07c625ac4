from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .config import LOG_DATE_FORMAT


# Define custom log levels for enhanced workflow visibility
STEP_LEVEL = 25  # Between INFO (20) and WARNING (30)
SUCCESS_LEVEL = 22  # Between INFO (20) and STEP (25)

# Register custom levels with the logging module
logging.addLevelName(STEP_LEVEL, "STEP")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


class LogCategory:
    """
    Constants for log categories, one per pipeline stage plus a few generic ones.
    """
    PLAN = "PLAN"
    LOAD = "LOAD"
    COMBINE = "COMBINE"
    FLATTEN = "FLATTEN"
    NUMBER = "NUMBER"
    LINK = "LINK"
    FORMAT = "FORMAT"
    CHECK = "CHECK"
    ERROR = "ERROR"
    DEBUG = "DEBUG"


class ColoredFormatter(logging.Formatter):
    """
    Custom formatter that adds ANSI color codes to log messages for terminal output,
    making different log levels and categories easily distinguishable.
    """

    # ANSI Color Codes
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD_CYAN = "\033[1;36m"
    BOLD_GREEN = "\033[1;32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BOLD_RED = "\033[1;31m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    GREEN = "\033[32m"
    DARK_GRAY = "\033[90m"
    BOLD_MAGENTA = "\033[1;35m"
    BOLD_BLUE = "\033[1;34m"
    RESET = "\033[0m"

    # Level colors
    LEVEL_COLORS = {
        "DEBUG": CYAN,
        "INFO": WHITE,
        "STEP": BOLD_CYAN,
        "SUCCESS": BOLD_GREEN,
        "WARNING": YELLOW,
        "ERROR": RED,
        "CRITICAL": BOLD_RED,
    }

    # Category colors
    CATEGORY_COLORS = {
        LogCategory.PLAN: MAGENTA,
        LogCategory.LOAD: BOLD_BLUE,
        LogCategory.COMBINE: CYAN,
        LogCategory.FLATTEN: CYAN,
        LogCategory.NUMBER: BOLD_MAGENTA,
        LogCategory.LINK: BLUE,
        LogCategory.FORMAT: GREEN,
        LogCategory.CHECK: YELLOW,
        LogCategory.ERROR: RED,
        LogCategory.DEBUG: DARK_GRAY,
    }

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record, prefixing the category tag and colouring the
        level name when colour output is enabled.
        """
        # Save original message and level name to restore later
        original_msg = record.msg
        original_levelname = record.levelname

        category = getattr(record, "category", None)

        if category:
            if self.use_color and category in self.CATEGORY_COLORS:
                tag = f"{self.CATEGORY_COLORS[category]}[{category}]{self.RESET}"
            else:
                tag = f"[{category}]"
            record.msg = f"{tag} {record.msg}"

        if self.use_color and record.levelname in self.LEVEL_COLORS:
            record.levelname = f"{self.LEVEL_COLORS[record.levelname]}{record.levelname}{self.RESET}"

        formatted = super().format(record)

        record.msg = original_msg
        record.levelname = original_levelname

        return formatted


class CategoryAdapter(logging.LoggerAdapter):
    """
    Adapter that adds category support to log messages.
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        """
        Move the category keyword into the record's extra dict.
        """
        extra = kwargs.get("extra", {})

        category = kwargs.pop("category", None)
        if category:
            extra["category"] = category

        kwargs["extra"] = extra
        return msg, kwargs


class Logger:
    """
    Thin wrapper around Python's standard logging module with colours, the
    custom STEP and SUCCESS levels, categories, and optional mirroring of the
    output to a log file.
    """

    LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(message)s"

    def __init__(self, name: str = "AffilForge"):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        self._logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stdout)
        self._console_handler.setLevel(logging.INFO)

        console_formatter = ColoredFormatter(self.LOG_FORMAT, use_color=sys.stdout.isatty())
        console_formatter.datefmt = LOG_DATE_FORMAT
        self._console_handler.setFormatter(console_formatter)
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None
        self._log_file_path: Optional[str] = None

        self._adapter = CategoryAdapter(self._logger, {})

    def set_log_file(self, path: str):
        """
        Start mirroring all log messages, debug included, to the specified file.
        """
        parent_dir = os.path.dirname(path)
        if parent_dir:
            os.makedirs(parent_dir, exist_ok=True)

        self.close()
        try:
            handler = logging.FileHandler(path, mode="w", encoding="utf-8")
        except OSError as e:
            self._logger.error(f"Failed to open log file {path}: {e}")
            return

        handler.setLevel(logging.DEBUG)
        handler.setFormatter(ColoredFormatter(self.LOG_FORMAT, use_color=False))
        handler.formatter.datefmt = LOG_DATE_FORMAT
        self._logger.addHandler(handler)
        self._file_handler = handler
        self._log_file_path = path

    def close(self):
        """
        Stop logging to file.
        """
        if self._file_handler:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
            self._log_file_path = None

    def step(self, msg: str, category: Optional[str] = None):
        """
        Log a top-level workflow step.
        """
        self._adapter.log(STEP_LEVEL, msg, category=category)

    def debug(self, msg: str, *, category: Optional[str] = None):
        self._adapter.debug(msg, category=category)

    def info(self, msg: str, *, category: Optional[str] = None):
        self._adapter.info(msg, category=category)

    def warn(self, msg: str, *, category: Optional[str] = None):
        self._adapter.warning(msg, category=category)

    def error(self, msg: str, *, category: Optional[str] = None):
        self._adapter.error(msg, category=category)

    def success(self, msg: str, *, category: Optional[str] = None):
        """
        Log successful operations.
        """
        self._adapter.log(SUCCESS_LEVEL, msg, category=category)

    @property
    def log_file_path(self) -> Optional[str]:
        return self._log_file_path


# Global logger instance
logger = Logger()
