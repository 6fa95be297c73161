"""Logging configuration for the ``myfridge`` namespace."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

# The Supabase client logs every PostgREST request through httpx at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "hpack")


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the app logger and quiet client libraries.

    Calling it again only updates the level.
    """
    logger = logging.getLogger("myfridge")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
