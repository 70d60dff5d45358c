"""Typed records returned by the UniFi controller.

Controllers add fields between releases, so every model accepts unknown keys
(``extra="allow"``) and only the commonly used fields are declared.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Base for controller records: keep unknown fields, allow attribute access."""

    model_config = ConfigDict(extra="allow", from_attributes=True, populate_by_name=True)


class Radio(_Record):
    """Radio information for UniFi access points."""

    name: Optional[str] = None
    radio: Optional[str] = None
    channel: Optional[Any] = None
    ht: Optional[Any] = None
    tx_power_mode: Optional[str] = None
    min_rssi_enabled: Optional[bool] = None
    sens_level_enabled: Optional[bool] = None


class Port(_Record):
    """Port information for UniFi switches."""

    port_idx: Optional[int] = None
    name: Optional[str] = None
    media: Optional[str] = None
    enable: Optional[bool] = None
    up: Optional[bool] = None
    speed: Optional[int] = None
    full_duplex: Optional[bool] = None
    is_uplink: Optional[bool] = None
    port_poe: Optional[bool] = None
    poe_enable: Optional[bool] = None
    poe_mode: Optional[str] = None
    poe_power: Optional[Any] = None
    rx_bytes: Optional[int] = None
    tx_bytes: Optional[int] = None
    rx_errors: Optional[int] = None
    tx_errors: Optional[int] = None


class SwitchStats(_Record):
    """Aggregate switch traffic counters."""

    rx_bytes: Optional[int] = None
    rx_packets: Optional[int] = None
    tx_bytes: Optional[int] = None
    tx_packets: Optional[int] = None


class SystemStats(_Record):
    """CPU/memory snapshot reported by a device (strings on most firmware)."""

    cpu: Optional[Any] = None
    mem: Optional[Any] = None
    uptime: Optional[Any] = None


class Device(_Record):
    """An adopted or pending UniFi device (AP, switch, gateway)."""

    id: Optional[str] = Field(default=None, alias="_id")
    mac: Optional[str] = Field(default=None, description="Device MAC address")
    name: Optional[str] = None
    model: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Device type: uap, usw, ugw, udm")
    state: Optional[int] = None
    ip: Optional[str] = None
    version: Optional[str] = None
    uptime: Optional[int] = None
    adopted: Optional[bool] = None
    site_id: Optional[str] = None
    cfgversion: Optional[str] = None
    config_network: Optional[Dict[str, Any]] = None
    radio_table: List[Radio] = Field(default_factory=list)
    port_table: List[Port] = Field(default_factory=list)
    stat_sw: Optional[SwitchStats] = None
    system_stats: Optional[SystemStats] = Field(default=None, alias="system-stats")
    general_temperature: Optional[float] = None
    num_sta: Optional[int] = None
    satisfaction: Optional[int] = None
    upgradable: Optional[bool] = None
    upgrade_to_firmware: Optional[str] = None


class Station(_Record):
    """A client (station) known to the controller, wired or wireless."""

    id: Optional[str] = Field(default=None, alias="_id")
    mac: Optional[str] = Field(default=None, description="Client MAC address")
    ip: Optional[str] = None
    hostname: Optional[str] = None
    name: Optional[str] = None
    oui: Optional[str] = None
    is_wired: Optional[bool] = None
    is_guest: Optional[bool] = None
    first_seen: Optional[int] = None
    last_seen: Optional[int] = None
    uptime: Optional[int] = None
    rx_bytes: Optional[int] = None
    rx_packets: Optional[int] = None
    tx_bytes: Optional[int] = None
    tx_packets: Optional[int] = None
    rssi: Optional[int] = None
    signal: Optional[int] = None
    noise: Optional[int] = None
    channel: Optional[int] = None
    radio: Optional[str] = None
    ap_mac: Optional[str] = None
    authorized: Optional[bool] = None
    blocked: Optional[bool] = None
    satisfaction: Optional[int] = None
    os_name: Optional[Any] = None
    device_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Best human-readable label for the client."""
        return self.name or self.hostname or self.mac or ""


class Network(_Record):
    """A network configuration (LAN, VLAN, WAN, VPN)."""

    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    purpose: Optional[str] = None
    vlan: Optional[int] = None
    vlan_enabled: Optional[bool] = None
    ip_subnet: Optional[str] = None
    dhcpd_enabled: Optional[bool] = None
    dhcpd_start: Optional[str] = None
    dhcpd_stop: Optional[str] = None
    dhcpd_gateway: Optional[str] = None
    dhcpd_dns: Optional[List[str]] = None
    networkgroup: Optional[str] = None
    site_id: Optional[str] = None


class Site(_Record):
    """A site (named partition) on the controller."""

    id: Optional[str] = Field(default=None, alias="_id")
    name: str
    desc: Optional[str] = None
    role: Optional[str] = None
    attr_hidden_id: Optional[str] = None
    attr_no_delete: Optional[bool] = None


class SystemInfo(_Record):
    """Controller system information (``stat/sysinfo``)."""

    version: Optional[str] = None
    build: Optional[str] = None
    hostname: Optional[str] = None
    timezone: Optional[str] = None
    uptime: Optional[int] = None
    loadavg_1: Optional[Any] = None
    loadavg_5: Optional[Any] = None
    loadavg_15: Optional[Any] = None
    mem_used: Optional[int] = None
    mem_buffer: Optional[int] = None
    mem_total: Optional[int] = None
    general_temperature: Optional[float] = None
    update_available: Optional[bool] = None


class Alert(_Record):
    """An alarm raised by the controller."""

    id: Optional[str] = Field(default=None, alias="_id")
    key: Optional[str] = None
    msg: Optional[str] = None
    time: Optional[int] = None
    datetime: Optional[str] = None
    site_id: Optional[str] = None
    site_name: Optional[str] = None
    subsystem: Optional[str] = None
    categ_id: Optional[int] = None
    archived: Optional[bool] = None
    is_admin: Optional[bool] = None
    handled_admin_id: Optional[str] = None
    handled_time: Optional[Any] = None


class ControllerInfo(_Record):
    """The logged-in admin's view of the controller (``/api/self``)."""

    admin_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    is_super: Optional[bool] = None
    build: Optional[str] = None
    version: Optional[str] = None
    uuid: Optional[str] = None
    update_available: Optional[bool] = None
    update_downloaded: Optional[bool] = None
