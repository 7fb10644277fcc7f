"""Logging helpers for the margin rollup application.

Loggers are built with a small fluent builder that writes dated log files
under ``<project root>/logs/<subdir>/`` and optionally mirrors records to the
console. Two process-wide singletons are exposed: the application logger
used by use cases and adapters, and the usage logger that records
user-initiated simulations from the UI.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Callable

from margin_rollup.utils.utils import get_project_root


FormatterFactory = Callable[[], logging.Formatter]
FileHandlerFactory = Callable[[Path, logging.Formatter], logging.Handler]
ConsoleHandlerFactory = Callable[[logging.Formatter], logging.Handler]


class LoggerBuilder:
    """Fluent builder for configured ``logging.Logger`` instances."""

    def __init__(self) -> None:
        self._name = "app"
        self._subdir = "app"
        self._prefix = "app_logs"
        self._console = False
        self._level = logging.INFO
        self._formatter: FormatterFactory = LoggerBuilder._default_formatter
        self._file_handler: FileHandlerFactory = (
            LoggerBuilder._default_file_handler
        )
        self._console_handler: ConsoleHandlerFactory = (
            LoggerBuilder._default_console_handler
        )

    def name(self, value: str) -> "LoggerBuilder":
        self._name = value
        return self

    def subdir(self, value: str) -> "LoggerBuilder":
        self._subdir = value
        return self

    def prefix(self, value: str) -> "LoggerBuilder":
        self._prefix = value
        return self

    def console(self, value: bool) -> "LoggerBuilder":
        self._console = value
        return self

    def level(self, value: int) -> "LoggerBuilder":
        self._level = value
        return self

    def formatter(self, factory: FormatterFactory) -> "LoggerBuilder":
        self._formatter = factory
        return self

    def file_handler(self, factory: FileHandlerFactory) -> "LoggerBuilder":
        self._file_handler = factory
        return self

    def console_handler(
        self,
        factory: ConsoleHandlerFactory,
    ) -> "LoggerBuilder":
        self._console_handler = factory
        return self

    def build(self) -> logging.Logger:
        """Build the logger, or return it unchanged when already configured.

        Returns:
            logging.Logger: Logger writing to the dated file of its subdir.
        """
        logger = logging.getLogger(self._name)
        logger.setLevel(self._level)
        if logger.handlers:
            return logger

        log_dir = get_project_root() / "logs" / self._subdir
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"{self._today_stamp()}_{self._prefix}.log"

        fmt = self._formatter()
        logger.addHandler(self._file_handler(log_path, fmt))
        if self._console:
            logger.addHandler(self._console_handler(fmt))
        logger.propagate = False
        return logger

    @staticmethod
    def _today_stamp() -> str:
        return date.today().strftime("%Y%m%d")

    @staticmethod
    def _default_formatter() -> logging.Formatter:
        return logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    @staticmethod
    def _default_file_handler(
        path: Path,
        fmt: logging.Formatter,
    ) -> logging.Handler:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler

    @staticmethod
    def _default_console_handler(fmt: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler


class Logger:
    """Singleton wrapper delegating to a built ``logging.Logger``."""

    _instance = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        name: str,
        subdir: str | None = None,
        prefix: str | None = None,
        console: bool = False,
    ) -> None:
        if self._initialized:
            return
        self.logger = (
            LoggerBuilder()
            .name(name)
            .subdir(subdir or name)
            .prefix(prefix or f"{name}_logs")
            .console(console)
            .build()
        )
        self._initialized = True

    def debug(self, msg: str, *args) -> None:
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args) -> None:
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args) -> None:
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args) -> None:
        self.logger.error(msg, *args)

    def critical(self, msg: str, *args) -> None:
        self.logger.critical(msg, *args)


class AppLogger(Logger):
    """Application logger (use cases, repositories, CLIs)."""

    _instance = None

    def __init__(self) -> None:
        super().__init__(
            "margin_rollup",
            subdir="app",
            prefix="app_logs",
            console=True,
        )


class UsageLogger(Logger):
    """Usage logger recording simulations requested from the UI."""

    _instance = None

    def __init__(self) -> None:
        super().__init__(
            "margin_rollup.usage",
            subdir="usage",
            prefix="usage_logs",
        )


def get_app_logger() -> AppLogger:
    """Return the application logger singleton."""
    return AppLogger()


def get_usage_logger() -> UsageLogger:
    """Return the usage logger singleton."""
    return UsageLogger()


__all__ = [
    "LoggerBuilder",
    "Logger",
    "AppLogger",
    "UsageLogger",
    "get_app_logger",
    "get_usage_logger",
]
