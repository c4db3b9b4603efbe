from __future__ import annotations

import logging
import os
import sys
from typing import Optional

_LOGGER_NAME = "ahtvc"
_LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}
_configured = False


def _determine_level() -> int:
    """Уровень из окружения: ``AHTVC_DEBUG=1`` важнее ``AHTVC_LOG_LEVEL``."""

    if os.getenv("AHTVC_DEBUG", "").strip() == "1":
        return logging.DEBUG
    name = os.getenv("AHTVC_LOG_LEVEL", "").strip().upper()
    return _LEVELS.get(name, logging.INFO)


def _managed_handler() -> Optional[logging.Handler]:
    for handler in logging.getLogger().handlers:
        if getattr(handler, "_ahtvc_managed", False):
            return handler
    return None


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root_logger = logging.getLogger()
    if _managed_handler() is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._ahtvc_managed = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
    root_logger.setLevel(_determine_level())
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Возвращает логгер AHTVC, при первом вызове настраивая root-логгер.

    Сообщения пишутся в текущий ``sys.stdout`` (он может быть подменён,
    например, при перехвате вывода в тестах).
    """

    _configure_root()
    handler = _managed_handler()
    if isinstance(handler, logging.StreamHandler):
        handler.setStream(sys.stdout)
    return logging.getLogger(name or _LOGGER_NAME)


def set_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Переопределяет уровень root-логгера по флагам CLI и возвращает его."""

    _configure_root()
    if verbose and quiet:
        raise ValueError("verbose и quiet взаимоисключающие")
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = _determine_level()
    logging.getLogger().setLevel(level)
    return level


__all__ = ["get_logger", "set_verbosity"]
