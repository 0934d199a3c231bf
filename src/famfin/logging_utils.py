"""Logging helpers shared by every famfin module.

Modules call ``get_logger(__name__)``; the root handler is installed once per
process so reloading modules never duplicates output.
"""

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def configure_root_logger(level: Union[int, str] = logging.WARNING) -> None:
    """Install the stream handler on the root logger.

    Later calls only adjust the level.
    """
    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger, making sure the root handler exists."""
    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
