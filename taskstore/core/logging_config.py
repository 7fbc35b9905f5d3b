"""Process-level logging configuration for applications embedding the store."""

import logging
import sys

from taskstore.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings | None = None) -> None:
    """Configure the root logger from settings. Safe to call more than once."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        format=LOG_FORMAT,
        stream=sys.stdout,
        level=log_level,
    )

    # Statement echo is controlled by DATABASE_ECHO, keep the engine quiet otherwise
    if settings.DATABASE_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    else:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
