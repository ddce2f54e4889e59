import logging
import json
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter


class LoggerManager:
    _loggers = {}

    @classmethod
    def get_logger(cls,
                   name: str,
                   log_file: Optional[str] = None,
                   level: str = "INFO",
                   use_json: bool = False,
                   use_color: bool = True) -> logging.Logger:
        """
        Retrieve or create a logger configured for console and optional file output.

        Console output always goes to stderr so that formatted YAML written to
        stdout is never interleaved with log lines.

        Args:
            name (str): A unique identifier (typically the module name).
            log_file (Optional[str]): Path to a log file. No file handler is added if unset.
            level (str): Logging level threshold ("DEBUG", "INFO", etc.).
            use_json (bool): If True, format file logs as JSON (for parsing).
            use_color (bool): If True, enable colored console output.

        Returns:
            logging.Logger: A fully configured logger instance.

        Raises:
            ValueError: If `level` is not a known logging level name.
        """
        if name in cls._loggers:
            return cls._loggers[name]

        level = resolve_level(level)

        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False  # Prevent duplicate logs

        logger.addHandler(cls._setup_console_handler(level, use_color))
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            logger.addHandler(cls._setup_file_handler(log_file, level, use_json))

        cls._loggers[name] = logger
        return logger

    @classmethod
    def reset(cls) -> None:
        """Closes and forgets every logger created so far."""
        for logger in cls._loggers.values():
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        cls._loggers.clear()

    @staticmethod
    def _setup_file_handler(filepath: str, level: str, use_json: bool) -> logging.Handler:
        """
        Creates and configures a file handler for logging.

        Args:
            filepath (str): Path to the log file.
            level (str): Logging level threshold.
            use_json (bool): Whether to use JSON formatting.

        Returns:
            logging.Handler: A file handler with formatter attached.
        """
        handler = logging.FileHandler(filepath, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(LoggerManager._get_formatter(use_json=use_json, color=False))
        return handler

    @staticmethod
    def _setup_console_handler(level: str, use_color: bool) -> logging.Handler:
        """
        Creates and configures a console (stderr) handler.

        Args:
            level (str): Logging level threshold.
            use_color (bool): Whether to use colored output.

        Returns:
            logging.Handler: A stream handler with formatter attached.
        """
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(LoggerManager._get_formatter(use_json=False, color=use_color))
        return handler

    @staticmethod
    def _get_formatter(use_json: bool = False, color: bool = False) -> logging.Formatter:
        """
        Returns a log formatter object based on configuration.

        Args:
            use_json (bool): If True, returns a JSON formatter (for structured logs).
            color (bool): If True, returns a colored formatter.

        Returns:
            logging.Formatter: A formatter instance.
        """
        if use_json:
            return JsonLogFormatter()

        fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"

        if color:
            return ColoredFormatter(
                fmt="%(log_color)s" + fmt,
                datefmt=datefmt,
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'bold_red',
                }
            )
        return logging.Formatter(fmt, datefmt)


def resolve_level(level: str) -> str:
    """
    Normalizes a level name ("debug" -> "DEBUG").

    Raises:
        ValueError: If the name is not a logging level.
    """
    name = str(level).strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"invalid log level: {name!r}")
    return name


class JsonLogFormatter(logging.Formatter):
    """
    A custom formatter that outputs logs in JSON format.

    Example Output:
        {
            "timestamp": "2025-05-07 13:12:01",
            "level": "WARNING",
            "logger": "yaml_recfmt",
            "message": "Failed to process broken.yaml: ...",
            "path": "broken.yaml"
        }

    Supports extra data via `extra={"extra_data": {...}}` in logging calls.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            log_record.update(record.extra_data)
        return json.dumps(log_record)
