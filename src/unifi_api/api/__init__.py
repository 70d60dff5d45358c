"""UniFi API client module.

This module provides the UnifiClient class for talking to UniFi Network
controllers, along with endpoint definitions, session state, the HTTP
transport, and the WebSocket event stream:

- UnifiClient: session lifecycle, request pipeline and typed operations
- EventChannel: named notification registry (``client.on("error", fn)``)
- EventStream: real-time events from ``/wss/s/<site>/events``
"""

from unifi_api.api.client import UnifiClient
from unifi_api.api.endpoints import (
    API_PREFIXES,
    Endpoints,
    get_api_prefix,
    get_endpoints,
)
from unifi_api.api.events import EventChannel
from unifi_api.api.session import SessionState
from unifi_api.api.transport import Transport
from unifi_api.api.websocket import (
    EVENT_ROUTES,
    EventEnvelope,
    EventStream,
    parse_event_envelope,
    route_event,
)

__all__ = [
    # Client
    "UnifiClient",
    # Notifications and WebSocket
    "EVENT_ROUTES",
    "EventChannel",
    "EventEnvelope",
    "EventStream",
    "parse_event_envelope",
    "route_event",
    # Endpoints
    "API_PREFIXES",
    "Endpoints",
    "get_api_prefix",
    "get_endpoints",
    # Session and transport
    "SessionState",
    "Transport",
]
