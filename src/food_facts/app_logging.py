"""Logging configuration helpers."""

import logging

_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: int = logging.INFO) -> None:
    """Route ``food_facts`` logs to one stream handler; safe to call repeatedly.

    Client libraries that log every request are held at WARNING.
    """
    logger = logging.getLogger("food_facts")
    logger.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
