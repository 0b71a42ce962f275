"""
CLI logging bootstrap.
Routes the jsmodpath logger hierarchy to a rich console handler on stderr.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "jsmodpath"
DEFAULT_LEVEL = "WARNING"


def resolve_level(level: Optional[str] = None) -> int:
    """Explicit level, else JSMODPATH_LOG_LEVEL, else WARNING."""
    name = (level or os.environ.get("JSMODPATH_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    return getattr(logging, name, logging.WARNING)


def init_logging(level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    # Replace our own handler on repeated calls
    for h in list(logger.handlers):
        if isinstance(h, RichHandler):
            logger.removeHandler(h)
    logger.addHandler(RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
    ))
    logger.propagate = False
    return logger
