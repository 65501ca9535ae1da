import logging
import os
from functools import wraps

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_ROOT_LOGGER = logging.getLogger("hnc")
_SPY_LOGGER = logging.getLogger("hnc.spy")


def spy_enabled() -> bool:
    val = os.getenv("HNC_SPY", "0")
    return str(val).lower() not in {"", "0", "false", "no"}


def spy_trace(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if spy_enabled():
            _SPY_LOGGER.debug("Entering %s", func.__qualname__)
        result = func(*args, **kwargs)
        if spy_enabled():
            _SPY_LOGGER.debug("Exiting %s", func.__qualname__)
        return result

    return wrapper


def configure_logging(level: int = logging.WARNING) -> None:
    """
    Ensure the ``hnc`` logger tree has a handler in case the app didn't configure logging.
    Safe to call multiple times.
    """
    if not _ROOT_LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _ROOT_LOGGER.addHandler(handler)
    _ROOT_LOGGER.setLevel(level)
    if spy_enabled():
        _SPY_LOGGER.setLevel(logging.DEBUG)
