"""Logging setup for the ``roost`` logger hierarchy.

Every module logs through ``logging.getLogger("roost.<area>")``. This
module attaches a single handler to the ``roost`` parent logger so that
routing failures land in one place with a timestamp and severity.
"""

import logging
import logging.handlers
from pathlib import Path

from roost.config import AppConfig

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_MARK = "_roost_handler"


def configure_logging(config: AppConfig) -> logging.Logger:
    """Attach the roost handler to the ``roost`` logger.

    Writes to a midnight-rotating file when ``config.log_file`` is set,
    otherwise to stderr. Calling it again replaces the previous handler
    instead of stacking a second one.
    """
    logger = logging.getLogger("roost")

    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            logger.removeHandler(existing)
            existing.close()

    handler: logging.Handler
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.TimedRotatingFileHandler(
            path, when="midnight", encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    setattr(handler, _HANDLER_MARK, True)
    logger.addHandler(handler)

    level = logging.DEBUG if config.debug else logging.getLevelName(config.log_level.upper())
    if isinstance(level, int):
        logger.setLevel(level)
    else:
        logger.setLevel(logging.INFO)
    return logger
