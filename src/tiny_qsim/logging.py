"""
Logging helpers for tiny-qsim.

All package loggers live under the ``tiny_qsim`` namespace, write to stderr
and default to WARNING so the simulator is silent unless asked.

Example
-------
>>> from tiny_qsim.logging import get_logger, set_log_level
>>> logger = get_logger(__name__)
>>> set_log_level("DEBUG")
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_ROOT = "tiny_qsim"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_default_level = logging.WARNING
_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get (or create) a cached package logger.

    Parameters
    ----------
    name : str, optional
        Usually ``__name__``. Names outside the package namespace are
        prefixed with ``tiny_qsim.``.

    Returns
    -------
    logging.Logger
    """
    if name is None:
        name = _ROOT
    logger_name = name if name == _ROOT or name.startswith(_ROOT + ".") else f"{_ROOT}.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_default_level)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_default_level)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every package logger, existing and future."""
    global _default_level
    level = _coerce_level(level)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    _default_level = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Replace the handlers of every package logger.

    Parameters
    ----------
    level : int or str
        Logging level, e.g. ``logging.INFO`` or ``"DEBUG"``.
    format_string : str, optional
        Record format. Defaults to ``[LEVEL] name: message``.
    stream : file-like, optional
        Destination stream. Defaults to ``sys.stderr``.
    """
    global _default_level
    level = _coerce_level(level)
    formatter = logging.Formatter(format_string or _FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _default_level = level
