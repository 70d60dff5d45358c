"""Structured logging configuration for programs using the UniFi API client.

The library itself only calls ``structlog.get_logger(__name__)``; embedding
applications call configure_logging() once at startup to choose the output.
Session secrets never reach the rendered output: values under the keys in
SECRET_KEYS are masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, List, Literal, MutableMapping

import structlog

if TYPE_CHECKING:
    from unifi_api.config import UnifiSettings

SECRET_KEYS = frozenset({"password", "cookie", "cookies", "csrf_token", "x-csrf-token"})
MASK = "***"

# Transport libraries that log every request at INFO through the standard library
NOISY_LOGGERS = ("httpx", "httpcore", "websockets")


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential values before they are rendered."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS and event_dict[key]:
            event_dict[key] = MASK
    return event_dict


def _renderer(log_format: str) -> List[structlog.typing.Processor]:
    if log_format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(
    log_format: Literal["json", "text"] = "json",
    log_level: str = "INFO",
    transport_level: str = "WARNING",
) -> None:
    """Configure structlog output.

    Args:
        log_format: "json" for production, "text" for console output
            (colored when stdout is a terminal).
        log_level: Minimum level for client events (DEBUG, INFO, WARNING, ERROR).
        transport_level: Minimum level for the httpx and websockets loggers.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.set_exc_info,
            redact_secrets,
            *_renderer(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(name)s %(levelname)s %(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level.upper())


def configure_from_settings(settings: UnifiSettings) -> None:
    """Apply the log_format/log_level fields of loaded settings."""
    configure_logging(log_format=settings.log_format, log_level=settings.log_level)
