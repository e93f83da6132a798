import logging
from typing import Optional

from colorlog import ColoredFormatter

from uowkit.core.settings import settings

LOGGER_NAME = "uowkit"

LOG_FORMAT = (
    "%(log_color)s%(asctime)s %(levelname)-8s"
    "%(reset)s %(purple)s%(name)s%(reset)s %(message)s"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(
        ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", reset=True, log_colors=LOG_COLORS)
    )
    return handler


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach the colored handler once and set the library log level."""
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level or settings.LOG_LEVEL)
    if not log.handlers:
        log.addHandler(_build_handler())
    log.propagate = False
    return log


logger = configure_logging()
