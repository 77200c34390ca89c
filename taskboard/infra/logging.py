from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from taskboard.config import PROJECT_ROOT, SETTINGS, Settings


def setup_logging(settings: Settings = SETTINGS) -> None:
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if settings.log_to_file:
        log_dir = PROJECT_ROOT / settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / "taskboard.log", maxBytes=2_000_000, backupCount=3
        )
        file_handler.setFormatter(formatter)
        handlers.insert(0, file_handler)

    logging.basicConfig(
        level=settings.log_level.upper(),
        handlers=handlers,
    )
