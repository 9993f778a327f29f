"""
Logger of the models layer.

Model helpers (DataFrame converters) log through ``statcards-models``. The
logger stays silent until ``setup_logging`` attaches a handler, which
``statcards.configs.logging_init.initialize_loggers`` does.
"""

import logging
import sys

from colorlog import ColoredFormatter

MODELS_LOG_FORMAT = (
    "%(log_color)s%(levelname)-8s%(reset)s %(name)s %(module)s.%(funcName)s:%(lineno)d %(message)s"
)

logger = logging.getLogger("statcards-models")
logger.addHandler(logging.NullHandler())


def setup_logging(verbose: bool = False, verbose_level: str = "INFO") -> logging.Logger:
    """Attach a colored stderr handler; without ``verbose`` only CRITICAL passes."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            MODELS_LOG_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    )
    logger.addHandler(handler)

    if not verbose:
        logger.setLevel(logging.CRITICAL)
        return logger

    level = logging.getLevelName(verbose_level.upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    return logger
