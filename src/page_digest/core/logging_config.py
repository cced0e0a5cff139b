from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from page_digest.core.config import AppConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    # getLevelName returns "Level X" for names it does not know.
    return level if isinstance(level, int) else logging.INFO


def configure_logging(config: AppConfig) -> None:
    """Send page_digest logs to the rotating app log and the console.

    The file keeps everything at the configured level; aiohttp's own chatter
    is capped at WARNING so per-request noise stays out of the log.
    """

    root = logging.getLogger()
    root.setLevel(resolve_level(config.log_level))

    fmt = logging.Formatter(LOG_FORMAT)

    config.paths.ensure()
    file_handler = RotatingFileHandler(
        config.paths.log_path,
        maxBytes=2_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler()
    console.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(file_handler)
    root.addHandler(console)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
