"""Base structured logging utilities for the site statistics layer.

Rationale:
- Central place to configure consistent JSON (or plain) logging.
- Avoid sprinkling ad-hoc logger setup across the stats modules.

All package loggers are children of the shared ``site_stats`` logger, which
owns the single console handler. The level can be overridden at runtime with
``SITESTATS_LOG_LEVEL``.
"""
from __future__ import annotations

import logging
import json
import sys
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from ..config.env import LOG_LEVEL_ENV
from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "site_stats"

_BASE_LOGGER_ATTR = "_site_stats_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_site_stats_console_handler"
_FILE_HANDLER_ATTR = "_site_stats_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level string into an integer constant.

    Accepts common names (DEBUG, INFO, WARNING, ERROR, CRITICAL) case-insensitively.
    Falls back to ``default`` on unknown values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize and return the shared ``site_stats`` logger."""

    logger = logging.getLogger(BASE_LOGGER_NAME)
    desired_level = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        if logger.level != desired_level:
            logger.setLevel(desired_level)
        for existing in list(logger.handlers):
            if not getattr(existing, _CONSOLE_HANDLER_ATTR, False):
                continue
            stream_obj = getattr(existing, "stream", None)
            if stream_obj is None or getattr(stream_obj, "closed", False):
                logger.removeHandler(existing)
                replacement = logging.StreamHandler(sys.stderr)
                replacement.setLevel(desired_level)
                replacement.setFormatter(_make_formatter(json_mode))
                setattr(replacement, _CONSOLE_HANDLER_ATTR, True)
                logger.addHandler(replacement)
                continue
            existing.setLevel(desired_level)
            if stream_obj is not sys.stderr:
                # capsys and friends swap sys.stderr between tests
                existing.setStream(sys.stderr)
            if json_mode != isinstance(existing.formatter, JsonFormatter):
                existing.setFormatter(_make_formatter(json_mode))
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired_level)
    handler.setFormatter(_make_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(
    name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO
) -> logging.Logger:
    """Return ``name`` as a child of the configured ``site_stats`` logger."""
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``site_stats`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired logging level. Accepts numeric levels or names (e.g., "DEBUG").
        When ``None``, the current level is preserved.
    file_path: Optional[str]
        When provided, a rotating file handler writing to ``file_path`` is
        attached (replacing any previously managed one). When ``None``, any
        managed file handler is removed.
    json_mode: bool
        Formatter used by the file handler.

    Returns
    -------
    logging.Logger
        The configured base logger.
    """
    logger = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)

    if level is not None:
        if isinstance(level, str):
            logger.setLevel(_parse_level(level, default=logger.level))
        else:
            logger.setLevel(level)
        for h in logger.handlers:
            h.setLevel(logger.level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in managed:
        if abs_path is not None and getattr(h, "baseFilename", None) == abs_path:
            h.setFormatter(_make_formatter(json_mode))
            h.setLevel(logger.level)
            return logger
        logger.removeHandler(h)
        h.close()
    if abs_path is None:
        return logger

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    # 10MB x 5 backups
    fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(fh, _FILE_HANDLER_ATTR, True)
    fh.setLevel(logger.level)
    fh.setFormatter(_make_formatter(json_mode))
    logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured log event.

    Parameters
    ----------
    logger: logging.Logger
        Logger instance (should be JSON formatted by ``get_logger``).
    event: str
        Event name (e.g. ``stats.load.tier``).
    ctx: LogContext | None
        Source/tier context; merged shallowly.
    level: int
        Logging level of the emitted record.
    keep_none: bool
        When ``True``, preserve keys whose values are ``None``; otherwise drop them.
    **fields: Any
        Arbitrary serializable key/value pairs.
    """
    if not logger.isEnabledFor(level):
        return
    payload = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
]
