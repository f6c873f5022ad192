"""Central logging configuration for the activity recommendation service."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from app.config import get_settings

_configured = False

# Client libraries log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def _default_config(log_dir: Path, level: str) -> dict:
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": fmt},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_dir / "app.log"),
                "encoding": "utf-8",
                "formatter": "standard",
                "level": level,
            },
        },
        "loggers": {
            name: {"level": "WARNING"} for name in _NOISY_LOGGERS
        },
        "root": {
            "level": level,
            "handlers": ["console", "file"],
        },
    }


def configure_logging() -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    try:
        settings = get_settings()
        log_dir = settings.log_dir
        level = settings.log_level
    except ValidationError:
        # Environment may be incomplete (e.g. a bad LOG_LEVEL); keep logging usable.
        log_dir = Path("logs")
        level = "INFO"
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(_default_config(log_dir, level))
    logging.getLogger(__name__).debug("Logging configured | level=%s dir=%s", level, log_dir)
    _configured = True
