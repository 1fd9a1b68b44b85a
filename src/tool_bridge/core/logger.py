"""Logging helpers shared by the bridge, its adapters and the dispatcher."""

import logging
import sys

_LOGGER_NAME = "tool_bridge"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the bridge logger or one of its children.

    Module names that already start with the package name are used as-is so
    ``get_logger(__name__)`` does not produce ``tool_bridge.tool_bridge...``.

    Args:
        name: Optional sub-logger name.

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def setup_logging(
    level: int = logging.INFO, format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """Attach a stdout handler to the bridge logger.

    Meant for the hosting application or a standalone script; calling it more
    than once is a no-op.

    Args:
        level: Logging level.
        format_str: Log format string.
    """
    logger = logging.getLogger(_LOGGER_NAME)

    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    logger.addHandler(handler)
    logger.setLevel(level)


logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
