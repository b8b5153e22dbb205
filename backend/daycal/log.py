"""
Logging helpers for daycal.

Library modules only call ``get_logger(__name__)``. Entry points (the API
factory, the Streamlit page) call ``configure_logging()`` once; it attaches a
stderr handler to the ``daycal`` logger and never touches the root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "daycal"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure the ``daycal`` logger only.

    Parameters
    ----------
    level:
        Level name ("DEBUG", "INFO", ...) or number. Defaults to INFO;
        unknown names also fall back to INFO.
    fmt, datefmt:
        Override the default record and date formats.
    force:
        Remove existing handlers first. Otherwise an already attached stderr
        handler is kept and only the level is updated.
    """
    if level is None:
        level = logging.INFO
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if force:
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
    else:
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr:
                handler.setLevel(level)
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or PACKAGE_LOGGER)
