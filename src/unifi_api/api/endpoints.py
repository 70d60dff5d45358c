"""API endpoint definitions for different UniFi controller types.

UniFi controllers have different API structures depending on controller type:
- UniFi OS consoles (UDM Pro, UCG Ultra): /api/auth/login and /proxy/network prefix
- Self-hosted Network application: /api/login with no prefix

Site-scoped templates take a ``{site}`` placeholder; per-record templates also
take ``{mac}`` or ``{id}``.
"""

from dataclasses import dataclass
from typing import Dict

from unifi_api.models import ControllerType


@dataclass(frozen=True)
class Endpoints:
    """Collection of API endpoints for a UniFi controller type.

    Attributes:
        login: Authentication endpoint (POST)
        logout: Logout endpoint (POST)
        self: Logged-in admin / controller info (GET)
        sites: Sites list endpoint (GET)
        devices: Device list endpoint (GET)
        device: Single device statistics (GET)
        device_manager: Device command endpoint (POST)
        clients: Active client list endpoint (GET)
        client: Single client statistics (GET)
        station_manager: Client command endpoint (POST)
        networks: Network configuration collection (GET/POST)
        network: Single network configuration (PUT/DELETE)
        sysinfo: System information (GET)
        alarms: Alarm list endpoint (GET)
        event_manager: Alarm/event command endpoint (POST)
        events_socket: WebSocket event stream path
    """

    login: str
    logout: str
    self: str
    sites: str
    devices: str
    device: str
    device_manager: str
    clients: str
    client: str
    station_manager: str
    networks: str
    network: str
    sysinfo: str
    alarms: str
    event_manager: str
    events_socket: str


def _network_endpoints(prefix: str, login: str, logout: str) -> Endpoints:
    """Build the endpoint table for a Network application mounted at prefix."""
    return Endpoints(
        login=login,
        logout=logout,
        self=f"{prefix}/api/self",
        sites=f"{prefix}/api/self/sites",
        devices=f"{prefix}/api/s/{{site}}/stat/device",
        device=f"{prefix}/api/s/{{site}}/stat/device/{{mac}}",
        device_manager=f"{prefix}/api/s/{{site}}/cmd/devmgr",
        clients=f"{prefix}/api/s/{{site}}/stat/sta",
        client=f"{prefix}/api/s/{{site}}/stat/user/{{mac}}",
        station_manager=f"{prefix}/api/s/{{site}}/cmd/stamgr",
        networks=f"{prefix}/api/s/{{site}}/rest/networkconf",
        network=f"{prefix}/api/s/{{site}}/rest/networkconf/{{id}}",
        sysinfo=f"{prefix}/api/s/{{site}}/stat/sysinfo",
        alarms=f"{prefix}/api/s/{{site}}/list/alarm",
        event_manager=f"{prefix}/api/s/{{site}}/cmd/evtmgr",
        events_socket=f"{prefix}/wss/s/{{site}}/events",
    )


# API prefix required for Network application endpoints
# UniFi OS consoles need /proxy/network prefix, self-hosted do not
API_PREFIXES: Dict[ControllerType, str] = {
    ControllerType.UNIFI_OS: "/proxy/network",
    ControllerType.SELF_HOSTED: "",
}

SELF_HOSTED_ENDPOINTS = _network_endpoints(
    API_PREFIXES[ControllerType.SELF_HOSTED],
    login="/api/login",
    logout="/api/logout",
)

UNIFI_OS_ENDPOINTS = _network_endpoints(
    API_PREFIXES[ControllerType.UNIFI_OS],
    login="/api/auth/login",
    logout="/api/auth/logout",
)


def get_endpoints(controller_type: ControllerType) -> Endpoints:
    """Get the API endpoints for a specific controller type.

    Example:
        >>> get_endpoints(ControllerType.SELF_HOSTED).devices.format(site="default")
        '/api/s/default/stat/device'
    """
    if controller_type == ControllerType.UNIFI_OS:
        return UNIFI_OS_ENDPOINTS
    return SELF_HOSTED_ENDPOINTS


def get_api_prefix(controller_type: ControllerType) -> str:
    """Get the API prefix for Network application endpoints."""
    return API_PREFIXES.get(controller_type, "")
