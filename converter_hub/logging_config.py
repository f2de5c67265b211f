"""Logging setup for the converter.

Everything logs under the ``converter_hub`` logger tree:
``.catalog``, ``.converter``, ``.storage``, ``.sources`` and ``.actions``.
The UI layer calls ``configure_logging()`` once at startup.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .infra.settings import SettingsLoader

LOGGER_NAME = "converter_hub"

_FORMATTER = logging.Formatter(
    fmt="%(levelname)s %(asctime)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)


def _level(name: object, fallback: int) -> int:
    level = logging.getLevelName(str(name or "").upper())
    return level if isinstance(level, int) else fallback


def _file_handler(settings: SettingsLoader, level: int) -> logging.Handler | None:
    log_file = settings.get("log_file")
    if not log_file:
        return None
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=int(settings.get("log_rotation_bytes", 1_048_576)),
        backupCount=int(settings.get("log_backup_count", 5)),
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def configure_logging() -> logging.Logger:
    """Attach file and console handlers to the ``converter_hub`` logger.

    The file receives ``log_level`` and above; the console only
    ``console_log_level`` and above, so a host UI is not flooded with
    action records. An empty ``log_file`` setting disables the file.
    Calling it again only re-applies levels.
    """
    settings = SettingsLoader()
    file_level = _level(settings.get("log_level"), logging.INFO)
    console_level = _level(settings.get("console_log_level"), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(min(file_level, console_level))
    if logger.handlers:
        return logger

    console = logging.StreamHandler()
    console.setLevel(console_level)
    handlers: list[logging.Handler] = [console]
    file_handler = _file_handler(settings, file_level)
    if file_handler is not None:
        handlers.append(file_handler)
    for handler in handlers:
        handler.setFormatter(_FORMATTER)
        logger.addHandler(handler)

    # requests' connection pool logs every request at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
