"""
Logging helpers.

Library modules only ever call ``get_logger(__name__)``; handlers are
installed by ``setup_logging`` which is left to applications (the CLI
calls it once on startup).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER = "dvfapi"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def setup_logging(level: str = "INFO", log_format: Optional[str] = None) -> logging.Logger:
    """
    Configure console logging for the ``dvfapi`` logger tree.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
            Unknown names fall back to INFO.
        log_format: custom format string, ``DEFAULT_FORMAT`` if None.

    Returns:
        The ``dvfapi`` root logger.
    """
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format=log_format or DEFAULT_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(lvl)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``dvfapi`` tree, e.g. ``dvfapi.client``."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
