"""Package loggers for fusionopt.

Every module logs through ``get_logger(__name__)``. Loggers live under the
``fusionopt`` namespace, write ``[LEVEL] name: message`` lines to stderr and
do not propagate to the root logger, so optimizer traces stay out of an
application's own handlers unless it asks for them via
:func:`configure_logging`.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_PACKAGE = "fusionopt"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Current output settings, shared by existing and future loggers
_level: int = logging.WARNING
_stream: Optional[IO[str]] = None
_format: str = _DEFAULT_FORMAT

_loggers: dict[str, logging.Logger] = {}


def _as_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _qualify(name: str) -> str:
    if name == _PACKAGE or name.startswith(_PACKAGE + "."):
        return name
    return f"{_PACKAGE}.{name}"


def _install_handler(logger: logging.Logger) -> None:
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    handler = logging.StreamHandler(_stream if _stream is not None else sys.stderr)
    handler.setLevel(_level)
    handler.setFormatter(logging.Formatter(_format))
    logger.addHandler(handler)
    logger.setLevel(_level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached package logger for ``name``.

    Args:
        name: Usually ``__name__`` of the calling module. Names outside the
            package are prefixed with ``fusionopt.``; ``None`` gives the
            package logger itself.

    Example:
        >>> from fusionopt.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("step=%d alpha=%.4g", 0, 0.25)
    """
    logger_name = _qualify(name or _PACKAGE)
    logger = _loggers.get(logger_name)
    if logger is None:
        logger = logging.getLogger(logger_name)
        if not logger.handlers:
            _install_handler(logger)
            logger.propagate = False
        _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of every fusionopt logger, including ones created later.

    Args:
        level: A ``logging`` constant or its name ('DEBUG', 'INFO', ...).
    """
    global _level
    _level = _as_level(level)
    for logger in _loggers.values():
        logger.setLevel(_level)
        for handler in logger.handlers:
            handler.setLevel(_level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Route fusionopt logging to ``stream`` with the given level and format.

    Existing loggers get a fresh handler; loggers created afterwards use the
    same settings.

    Example:
        >>> import logging
        >>> from fusionopt.logging import configure_logging
        >>> configure_logging(level=logging.DEBUG)
    """
    global _level, _stream, _format
    _level = _as_level(level)
    _stream = stream
    _format = format_string or _DEFAULT_FORMAT
    for logger in _loggers.values():
        _install_handler(logger)


__all__ = ["configure_logging", "get_logger", "set_log_level"]
