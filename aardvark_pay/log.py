"""Logging setup shared by the payment engine modules."""
from __future__ import annotations

import logging
from typing import Optional, Union

LOGGER_NAME = "aardvark_pay"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Install a basic console handler once and set the package log level."""
    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), logging.INFO)
    if level is None:
        level = logging.INFO
    logging.basicConfig(level=logging.WARNING, format=_FORMAT)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
