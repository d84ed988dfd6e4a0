"""
Structured logging for the flashonstellar package.

All package loggers live under the ``flashonstellar`` namespace and are
silent until the application configures logging. Structured fields are
passed through ``extra=`` and rendered by the default formatter.

Example:
    ```python
    from flashonstellar.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("Submitted", extra={"tx_hash": "abc123"})
    ```
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

ROOT_LOGGER_NAME = "flashonstellar"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s%(context)s"

# attributes every LogRecord carries; anything else came in through extra=
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "context"}

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


class StructuredFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED and not key.startswith("_")
        }
        record.context = (
            " " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
            if fields
            else ""
        )
        return super().format(record)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger in the package namespace.

    Args:
        name: Module name, usually ``__name__``. Names outside the package
            namespace are nested under it.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a handler to the package root logger.

    Calling this again replaces the previously configured handler.

    Args:
        level: Log level name or number.
        fmt: Format string. ``%(context)s`` expands to the extra fields.
        handler: Handler to use (defaults to a stderr StreamHandler).

    Returns:
        The package root logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(root.handlers):
        if getattr(existing, "_flashonstellar", False):
            root.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(fmt))
    handler._flashonstellar = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    return root


def set_level(level: Union[int, str]) -> None:
    """Set the level of the package root logger."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def disable_logging() -> None:
    """Silence all package loggers until the level is set again."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.CRITICAL + 1)


class LogContext(logging.LoggerAdapter):
    """
    Logger adapter that binds fields to every record.

    Example:
        ```python
        log = LogContext(get_logger(__name__), method="transfer")
        log.info("Simulated", extra={"read_only": False})
        ```
    """

    def __init__(self, logger: logging.Logger, **fields: Any) -> None:
        super().__init__(logger, fields)

    def process(self, msg: Any, kwargs: Any) -> Any:
        extra = {**dict(self.extra or {}), **kwargs.get("extra", {})}
        kwargs["extra"] = extra
        return msg, kwargs
