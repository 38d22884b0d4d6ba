"""Console logging for the feeding window."""

import logging
import sys

LOGGER_NAME = "feed_whatever"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: int = logging.INFO) -> None:
    """Send ``feed_whatever.*`` records to stderr; repeated calls only adjust the level."""
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level)
    if app_logger.handlers:
        return
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    app_logger.addHandler(console)
    app_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """Return a logger nested under the application namespace."""
    return logging.getLogger(f"{LOGGER_NAME}.{module_name}")
