"""Process-wide logging for the zoomreel CLI."""

import logging
import os

LEVEL_ENV = "ZOOMREEL_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def log_level(args=None, environ=None):
    """ZOOMREEL_LOG_LEVEL wins, then --debug, then --quiet, else INFO."""
    environ = os.environ if environ is None else environ
    name = environ.get(LEVEL_ENV, "").strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    if getattr(args, "debug", False):
        return logging.DEBUG
    if getattr(args, "quiet", False):
        return logging.WARNING
    return logging.INFO


def setup_logging(args=None):
    # leave an already configured root alone (embedding apps, pytest)
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=log_level(args), format=LOG_FORMAT, datefmt="%H:%M:%S")
