"""
Logging entry point for depflow

Every module obtains its logger through ``get_logger(__name__)`` so that the
whole package shares one "depflow" logger hierarchy and one handler.
"""

import logging
import os

_ROOT_LOGGER_NAME = "depflow"
_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    level_name = os.getenv("DEPFLOW_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        root.addHandler(handler)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger inside the depflow hierarchy.

    Args:
        name: Module name (usually ``__name__``). Names outside the
            ``depflow`` namespace are nested under it.

    Returns:
        Configured logger instance
    """
    _configure_root()
    if not name or name == _ROOT_LOGGER_NAME:
        return logging.getLogger(_ROOT_LOGGER_NAME)
    if not name.startswith(_ROOT_LOGGER_NAME + "."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


__all__ = ["get_logger"]
