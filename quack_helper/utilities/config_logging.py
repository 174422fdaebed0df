# quack_helper/utilities/config_logging.py
from __future__ import annotations

import copy
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

LOGGING: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s "
            "[%(process)d:%(threadName)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "simple",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "verbose",
            "filename": "logs/quack_helper.log",
            "maxBytes": 5_000_000,
            "backupCount": 5,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        # root logger
        "": {
            "level": "DEBUG",
            "handlers": ["console", "file"],
        },
        "openpyxl": {"level": "WARNING", "propagate": True},
    },
}


def configure_logging(
    log_dir: Optional[Path] = None, *, console_only: bool = False
) -> Dict[str, Any]:
    """
    Apply LOGGING via dictConfig and return the dictionary actually used.

    The rotating file handler writes under ``log_dir`` (default ``./logs``),
    which is created if missing. ``console_only`` drops the file handler.
    """
    config = copy.deepcopy(LOGGING)
    if console_only:
        del config["handlers"]["file"]
        config["loggers"][""]["handlers"] = ["console"]
    else:
        target = Path(log_dir) if log_dir is not None else Path("logs")
        target.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"]["filename"] = str(target / "quack_helper.log")
    logging.config.dictConfig(config)
    return config
