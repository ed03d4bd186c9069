"""Logging configuration.

Console output goes through Rich; a plain file log is added when a path is
given. Nothing here runs at import time: the entry point calls
``setup_logging`` once.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional, Union


def setup_logging(
    log_level: Union[str, int] = logging.INFO,
    log_path: Optional[Union[str, Path]] = None,
) -> None:
    """Configure the root logger with a Rich console handler.

    Args:
        log_level: Level name or number.
        log_path: Optional log file. File logging is disabled when ``None``.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "level": log_level,
            "class": "rich.logging.RichHandler",
            "formatter": "console",
            "show_time": True,
            "show_path": False,
            "markup": False,
            "rich_tracebacks": True,
        }
    }
    if log_path:
        handlers["file"] = {
            "level": log_level,
            "class": "logging.FileHandler",
            "filename": str(log_path),
            "encoding": "utf-8",
            "formatter": "file",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": "%(message)s", "datefmt": "[%X]"},
                "file": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": handlers,
            "root": {"level": log_level, "handlers": list(handlers)},
            "loggers": {
                # Flask's dev server logs every request at INFO
                "werkzeug": {"level": "WARNING"},
            },
        }
    )
