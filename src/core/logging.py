import logging

from .config import settings
from .config_models import LoggingConfig

# Third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger once from ``LoggingConfig``.

    Calling it again only adjusts levels, so the app factory and the test
    suite may both call it.
    """
    cfg = config or settings.logging
    level = logging.getLevelName(cfg.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=cfg.format)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
    for name, name_level in cfg.loggers.items():
        logging.getLogger(name).setLevel(name_level.upper())


__all__ = ["setup_logging", "QUIET_LOGGERS"]
