"""Data models for the UniFi API client."""

from .envelope import SUCCESS_RC, ResponseEnvelope, ResponseMeta
from .enums import ClientEvent, ControllerType, ErrorCode, StreamState
from .records import (
    Alert,
    ControllerInfo,
    Device,
    Network,
    Port,
    Radio,
    Site,
    Station,
    SwitchStats,
    SystemInfo,
    SystemStats,
)

__all__ = [
    "Alert",
    "ClientEvent",
    "ControllerInfo",
    "ControllerType",
    "Device",
    "ErrorCode",
    "Network",
    "Port",
    "Radio",
    "ResponseEnvelope",
    "ResponseMeta",
    "SUCCESS_RC",
    "Site",
    "Station",
    "StreamState",
    "SwitchStats",
    "SystemInfo",
    "SystemStats",
]
