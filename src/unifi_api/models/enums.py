"""Shared enumerations for the UniFi API models."""

from enum import Enum


class ControllerType(str, Enum):
    """Type of UniFi controller."""

    SELF_HOSTED = "self_hosted"
    UNIFI_OS = "unifi_os"


class ErrorCode(str, Enum):
    """Discriminable kind attached to every UnifiAPIError."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    API_ERROR = "API_ERROR"
    NOT_FOUND = "NOT_FOUND"
    EVENT_PARSE_ERROR = "EVENT_PARSE_ERROR"


class ClientEvent(str, Enum):
    """Names of the notifications a UnifiClient emits."""

    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"
    EVENTS_CONNECTED = "events.connected"
    EVENTS_DISCONNECTED = "events.disconnected"
    ERROR = "error"
    CLIENT_CONNECTED = "client.connected"
    CLIENT_DISCONNECTED = "client.disconnected"
    DEVICE_DETECTED = "device.detected"
    DEVICE_LOST = "device.lost"
    EVENT = "event"
    RAW_EVENT = "raw_event"


class StreamState(str, Enum):
    """Lifecycle of the persistent event connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
