"""
Shared logger for every statcards module.

Importing this module configures the ``statcards`` logger from
``Settings().logging``; ``initialize_loggers`` re-applies a level to it and
to the models-layer logger at once.
"""

import logging
from typing import Optional

from statcards.configs.custom_logging import format_pydantic, setup_logging
from statcards.configs.settings_models import Settings
from statcards.models.logging import setup_logging as setup_models_logging

__all__ = ["logger", "initialize_loggers", "format_pydantic"]

settings = Settings()

logger = setup_logging(__name__, level=settings.logging.verbosity_level)


def initialize_loggers(
    verbose: Optional[bool] = True,
    verbose_level: Optional[str] = None,
) -> logging.Logger:
    """
    Align the statcards and models loggers on one verbosity.

    Args:
        verbose: When False the models logger only lets CRITICAL through
        verbose_level: Level name (DEBUG, INFO, ...); defaults to
            ``STATCARDS_LOGGING_VERBOSITY_LEVEL``

    Returns:
        The ``statcards`` logger
    """
    level = verbose_level or settings.logging.verbosity_level
    setup_models_logging(verbose=verbose is not False, verbose_level=level)
    # setup_logging reconfigures the same logger object in place
    return setup_logging(__name__, level=level)
