"""
UniFi API - Async client for UniFi Network controllers.

This package provides an authenticated client for the UniFi controller HTTP
API and its real-time WebSocket event stream.

Features:
- Lazy, single-flight authentication with cookie and CSRF session handling
- Typed device, client, network, statistics and alert operations
- Named notifications for connection lifecycle and controller events
- Configuration via YAML with environment variable overrides
- Structured logging (JSON for production, text for development)
"""

from unifi_api.api import UnifiClient
from unifi_api.config import ControllerConfig, UnifiSettings, load_config
from unifi_api.exceptions import (
    ApiResponseError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    EventParseError,
    NotFoundError,
    UnifiAPIError,
)
from unifi_api.models import ClientEvent, ControllerType, ErrorCode

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "UnifiClient",
    "ControllerConfig",
    "UnifiSettings",
    "load_config",
    "ApiResponseError",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionError",
    "EventParseError",
    "NotFoundError",
    "UnifiAPIError",
    "ClientEvent",
    "ControllerType",
    "ErrorCode",
]
