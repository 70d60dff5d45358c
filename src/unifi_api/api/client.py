"""Async UniFi API client.

UnifiClient provides a high-level interface to a UniFi Network controller:
session management, a single request pipeline every operation goes through,
typed device/client/network/alert operations, and real-time notifications.

Features:
- Lazy authentication: the first data call logs in automatically
- Concurrent first calls share a single login round trip
- Envelope unwrapping with typed errors (see exceptions.py)
- WebSocket event stream with named notifications
- No hidden retries; every failure surfaces to the caller

Example usage:
    from unifi_api import ControllerConfig, UnifiClient

    config = ControllerConfig(host="192.168.1.1", username="admin", password="secret")

    async with UnifiClient(config) as client:
        devices = await client.get_devices()
        print(f"Found {len(devices)} devices")
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Type, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from unifi_api.config import ControllerConfig, format_validation_errors
from unifi_api.exceptions import (
    ApiResponseError,
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
)
from unifi_api.models import (
    Alert,
    ClientEvent,
    ControllerInfo,
    ControllerType,
    Device,
    Network,
    ResponseEnvelope,
    Site,
    Station,
    StreamState,
    SystemInfo,
)

from .endpoints import get_endpoints
from .events import EventChannel, EventName, Handler
from .session import SessionState
from .transport import Transport
from .websocket import EventEnvelope, EventStream

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

# Only these methods carry a request body
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _coerce_config(
    config: Union[ControllerConfig, Mapping[str, Any], None],
    options: Mapping[str, Any],
) -> ControllerConfig:
    """Build a ControllerConfig from a config object, a mapping, or keyword options."""
    if isinstance(config, ControllerConfig):
        if not options:
            return config
        # Rebuild so overrides pass the same validators as the original
        values = {**config.model_dump(), **options}
    else:
        values = {**dict(config or {}), **options}
    try:
        return ControllerConfig(**values)
    except ValidationError as e:
        raise ConfigurationError("\n".join(format_validation_errors(e.errors()))) from e


def _decode_json(response: httpx.Response) -> Any:
    """Decode a JSON body, returning None when the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def _as_records(data: Any) -> List[Any]:
    """Normalize a payload that may be an array, a single object, or absent."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    return []


def _find_by_mac(records: Sequence[Any], mac: str, kind: str) -> Any:
    """Linear case-insensitive scan for a record with the given MAC."""
    wanted = mac.lower()
    for record in records:
        if record.mac is not None and record.mac.lower() == wanted:
            return record
    raise NotFoundError(kind=kind, identifier=mac)


def _malformed(model: Type[BaseModel], path: str, error: ValidationError) -> ApiResponseError:
    """Describe a record the controller sent that does not fit its model."""
    first = error.errors()[0] if error.error_count() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    logger.warning(
        "malformed_record",
        model=model.__name__,
        path=path,
        errors=error.error_count(),
    )
    return ApiResponseError(
        f"Malformed {model.__name__} record from {path} at {location}: "
        f"{first.get('msg', 'invalid value')}"
    )


def _body(config: Union[BaseModel, Mapping[str, Any]]) -> dict[str, Any]:
    """Serialize a network configuration for the controller."""
    if isinstance(config, BaseModel):
        return config.model_dump(by_alias=True, exclude_none=True)
    return dict(config)


class UnifiClient:
    """Client for a UniFi Network controller.

    One instance holds one controller session and at most one event
    connection. Use it as an async context manager so both are released:

        async with UnifiClient(config) as client:
            await client.enable_events()
            ...

    Attributes:
        config: Immutable connection configuration.
        session: Current session credentials.
        endpoints: API paths for the configured controller type.
    """

    def __init__(
        self,
        config: Union[ControllerConfig, Mapping[str, Any], None] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        **options: Any,
    ) -> None:
        """Initialize the client.

        Args:
            config: A ControllerConfig, or a mapping of its fields.
            http_client: Pre-built httpx.AsyncClient (mainly for tests).
            **options: Individual configuration fields; override ``config``.

        Raises:
            ConfigurationError: host, username or password missing, or a field
                value is invalid.
        """
        self.config = _coerce_config(config, options)
        self.session = SessionState()
        self.endpoints = get_endpoints(self.config.controller_type)
        self._channel = EventChannel()
        self._transport = Transport(self.config, self.session, client=http_client)
        self._events = EventStream(
            self.config,
            self.session,
            self._channel,
            self.endpoints.events_socket,
        )
        self._pending_login: Optional[asyncio.Future[bool]] = None

    # -------------------------------------------------------------------------
    # Properties and notifications
    # -------------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        """Base URL of the controller, e.g. https://192.168.1.1:8443."""
        return self.config.base_url

    @property
    def site(self) -> str:
        """Configured site name."""
        return self.config.site

    @property
    def is_authenticated(self) -> bool:
        """Whether the current session is believed valid."""
        return self.session.is_authenticated

    @property
    def events_state(self) -> StreamState:
        """Lifecycle state of the event connection."""
        return self._events.state

    @property
    def events_connected(self) -> bool:
        """Whether the event connection is open."""
        return self._events.is_connected

    def on(self, name: EventName, handler: Optional[Handler] = None) -> Any:
        """Subscribe to a notification; usable as a decorator."""
        return self._channel.on(name, handler)

    def once(self, name: EventName, handler: Handler) -> Handler:
        """Subscribe to the next occurrence of a notification only."""
        return self._channel.once(name, handler)

    def off(self, name: EventName, handler: Handler) -> None:
        """Unsubscribe a handler."""
        self._channel.off(name, handler)

    def listener_count(self, name: EventName) -> int:
        """Number of handlers subscribed to a notification."""
        return self._channel.listener_count(name)

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    async def login(self) -> bool:
        """Authenticate with the controller.

        Self-hosted controllers report success with ``meta.rc == "ok"``;
        UniFi OS consoles answer 2xx with a bare user object and pass the
        CSRF token in a response header.

        Returns:
            True on success.

        Raises:
            AuthenticationError: Credentials rejected.
            ConnectionError: Controller unreachable.

        Note:
            Password is never logged. Username is logged at DEBUG only.
        """
        logger.debug(
            "authenticating",
            username=self.config.username,
            controller_type=self.config.controller_type.value,
        )

        try:
            try:
                response = await self._transport.request(
                    "POST",
                    self.endpoints.login,
                    json={
                        "username": self.config.username,
                        "password": self.config.password,
                        "remember": False,
                    },
                )
            except httpx.HTTPStatusError as e:
                if not 400 <= e.response.status_code < 500:
                    raise
                envelope = ResponseEnvelope.from_payload(_decode_json(e.response))
                detail = envelope.meta.msg or f"status code {e.response.status_code}"
                raise AuthenticationError(f"Authentication failed: {detail}") from e

            csrf_token = response.headers.get("x-csrf-token")
            if self.config.controller_type != ControllerType.UNIFI_OS:
                envelope = ResponseEnvelope.from_payload(_decode_json(response))
                if not envelope.ok:
                    raise AuthenticationError("Authentication failed: Invalid response")
                csrf_token = envelope.meta.csrf_token or csrf_token
        except Exception:
            self.session.invalidate()
            raise

        if csrf_token:
            self.session.csrf_token = csrf_token
        self.session.is_authenticated = True

        logger.info("login_successful", host=self.config.host, site=self.config.site)
        self._channel.emit(ClientEvent.AUTHENTICATED)
        return True

    async def logout(self) -> bool:
        """End the session (best-effort).

        The session is cleared, the event connection closed and
        ``disconnected`` emitted whether or not the controller accepted the
        logout call; a controller that already dropped the session is not an
        error.

        Returns:
            Always True.
        """
        try:
            await self._transport.request("POST", self.endpoints.logout)
            logger.debug("logout_successful")
        except Exception as e:
            logger.debug("logout_failed", error=str(e), error_type=type(e).__name__)

        self.session.clear()
        await self._events.close()

        logger.info("disconnected", host=self.config.host)
        self._channel.emit(ClientEvent.DISCONNECTED)
        return True

    async def ensure_authenticated(self) -> None:
        """Log in unless the session is already authenticated.

        Concurrent callers arriving while a login is in flight await that
        same login instead of starting their own.

        Raises:
            AuthenticationError: The login attempt failed.
        """
        if self.session.is_authenticated:
            return

        if self._pending_login is None:
            self._pending_login = asyncio.ensure_future(self.login())
            self._pending_login.add_done_callback(self._clear_pending_login)

        await asyncio.shield(self._pending_login)

    def _clear_pending_login(self, _future: asyncio.Future[bool]) -> None:
        self._pending_login = None

    # -------------------------------------------------------------------------
    # Request pipeline
    # -------------------------------------------------------------------------

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
    ) -> Any:
        """Make an authenticated API call and unwrap the response envelope.

        Args:
            path: API path, e.g. "/api/s/default/stat/device".
            method: HTTP method.
            body: JSON body; only sent for POST, PUT and PATCH.

        Returns:
            The envelope's ``data`` section, or the whole decoded response
            when it has none.

        Raises:
            AuthenticationError: Login failed, or the controller answered 401.
            ConnectionError: Controller unreachable.
            ApiResponseError: The envelope's result code is not "ok".
            httpx.HTTPError: Any other transport failure, unmodified.
        """
        await self.ensure_authenticated()

        method = method.upper()
        json_body = body if method in BODY_METHODS else None
        response = await self._transport.request(method, path, json=json_body)

        payload = _decode_json(response)
        envelope = ResponseEnvelope.from_payload(payload)
        if not envelope.ok:
            logger.warning("api_error", path=path, method=method, server_message=envelope.meta.msg)
            raise ApiResponseError(envelope.meta.msg)

        return envelope.data if envelope.data is not None else payload

    def _site_path(self, template: str, **params: str) -> str:
        """Fill a site-scoped endpoint template."""
        return template.format(site=self.config.site, **params)

    async def _get_list(self, model: Type[RecordT], path: str) -> List[RecordT]:
        """GET a collection and validate it into typed records."""
        data = await self.request(path)
        records = data if isinstance(data, list) else []
        try:
            return TypeAdapter(List[model]).validate_python(records)  # type: ignore[valid-type]
        except ValidationError as e:
            raise _malformed(model, path, e) from e

    async def _get_first(
        self,
        model: Type[RecordT],
        path: str,
        method: str = "GET",
        body: Any = None,
    ) -> Optional[RecordT]:
        """Call a single-record endpoint; the controller wraps the record in an array."""
        records = _as_records(await self.request(path, method, body))
        if not records:
            return None
        try:
            return model.model_validate(records[0])
        except ValidationError as e:
            raise _malformed(model, path, e) from e

    async def _command(self, template: str, cmd: str, **fields: Any) -> bool:
        """POST a manager command such as ``{"cmd": "restart", "mac": ...}``."""
        await self.request(self._site_path(template), "POST", {"cmd": cmd, **fields})
        logger.info("command_sent", cmd=cmd, site=self.config.site, **fields)
        return True

    # -------------------------------------------------------------------------
    # Devices
    # -------------------------------------------------------------------------

    async def get_devices(self) -> List[Device]:
        """Get all devices in the site."""
        devices = await self._get_list(Device, self._site_path(self.endpoints.devices))
        logger.debug("devices_retrieved", count=len(devices), site=self.config.site)
        return devices

    async def get_device(self, mac: str) -> Device:
        """Get a device by MAC address (case-insensitive).

        Raises:
            NotFoundError: No device with that MAC in the site.
        """
        return _find_by_mac(await self.get_devices(), mac, "Device")

    async def restart_device(self, mac: str) -> bool:
        """Restart a device."""
        return await self._command(self.endpoints.device_manager, "restart", mac=mac)

    async def adopt_device(self, mac: str) -> bool:
        """Adopt a pending device."""
        return await self._command(self.endpoints.device_manager, "adopt", mac=mac)

    async def forget_device(self, mac: str) -> bool:
        """Forget (remove) a device from the site."""
        return await self._command(self.endpoints.device_manager, "forget", mac=mac)

    async def get_device_stats(self, mac: str) -> Optional[Device]:
        """Get statistics for one device, or None if the controller has none."""
        return await self._get_first(Device, self._site_path(self.endpoints.device, mac=mac))

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    async def get_clients(self) -> List[Station]:
        """Get all currently connected clients."""
        clients = await self._get_list(Station, self._site_path(self.endpoints.clients))
        logger.debug("clients_retrieved", count=len(clients), site=self.config.site)
        return clients

    async def get_client(self, mac: str) -> Station:
        """Get a connected client by MAC address (case-insensitive).

        Raises:
            NotFoundError: No connected client with that MAC.
        """
        return _find_by_mac(await self.get_clients(), mac, "Client")

    async def block_client(self, mac: str) -> bool:
        """Block a client from the network."""
        return await self._command(self.endpoints.station_manager, "block-sta", mac=mac)

    async def unblock_client(self, mac: str) -> bool:
        """Unblock a previously blocked client."""
        return await self._command(self.endpoints.station_manager, "unblock-sta", mac=mac)

    async def reconnect_client(self, mac: str) -> bool:
        """Force a client to reconnect (kick)."""
        return await self._command(self.endpoints.station_manager, "kick-sta", mac=mac)

    async def get_client_stats(self, mac: str) -> Optional[Station]:
        """Get the stored record for one client, or None if unknown."""
        return await self._get_first(Station, self._site_path(self.endpoints.client, mac=mac))

    # -------------------------------------------------------------------------
    # Networks
    # -------------------------------------------------------------------------

    async def get_networks(self) -> List[Network]:
        """Get network configurations."""
        return await self._get_list(Network, self._site_path(self.endpoints.networks))

    async def create_network(self, config: Union[Network, Mapping[str, Any]]) -> Network:
        """Create a network; returns the record as stored by the controller."""
        network = await self._get_first(
            Network,
            self._site_path(self.endpoints.networks),
            "POST",
            _body(config),
        )
        if network is None:
            raise ApiResponseError("Controller returned no network record")
        logger.info("network_created", network_id=network.id, site=self.config.site)
        return network

    async def update_network(
        self,
        network_id: str,
        config: Union[Network, Mapping[str, Any]],
    ) -> Network:
        """Update a network configuration."""
        network = await self._get_first(
            Network,
            self._site_path(self.endpoints.network, id=network_id),
            "PUT",
            _body(config),
        )
        if network is None:
            raise ApiResponseError("Controller returned no network record")
        return network

    async def delete_network(self, network_id: str) -> bool:
        """Delete a network configuration."""
        await self.request(self._site_path(self.endpoints.network, id=network_id), "DELETE")
        logger.info("network_deleted", network_id=network_id, site=self.config.site)
        return True

    # -------------------------------------------------------------------------
    # Statistics, controller and alerts
    # -------------------------------------------------------------------------

    async def get_system_stats(self) -> List[SystemInfo]:
        """Get controller system information for the site."""
        return await self._get_list(SystemInfo, self._site_path(self.endpoints.sysinfo))

    async def get_controller_info(self) -> ControllerInfo:
        """Get the controller's view of the logged-in admin and its version."""
        info = await self._get_first(ControllerInfo, self.endpoints.self)
        return info if info is not None else ControllerInfo()

    async def get_sites(self) -> List[Site]:
        """Get all sites visible to the logged-in admin."""
        sites = await self._get_list(Site, self.endpoints.sites)
        logger.debug("sites_retrieved", count=len(sites))
        return sites

    async def get_alerts(self) -> List[Alert]:
        """Get alarms for the site."""
        alerts = await self._get_list(Alert, self._site_path(self.endpoints.alarms))
        logger.debug("alerts_retrieved", count=len(alerts), site=self.config.site)
        return alerts

    async def archive_alert(self, alert_id: str) -> bool:
        """Archive an alarm."""
        return await self._command(self.endpoints.event_manager, "archive-alarm", _id=alert_id)

    # -------------------------------------------------------------------------
    # Real-time events
    # -------------------------------------------------------------------------

    async def enable_events(self) -> bool:
        """Open the real-time event stream.

        Returns immediately if already connected. Otherwise logs in if needed
        and returns once the WebSocket is open.

        Raises:
            AuthenticationError: Login failed.
            ConnectionError: The WebSocket failed before opening.
        """
        if self._events.is_connected:
            return True
        await self.ensure_authenticated()
        return await self._events.open()

    async def disable_events(self) -> bool:
        """Close the event stream if open. Safe to call repeatedly."""
        await self._events.close()
        return True

    def handle_event(self, message: Any) -> Optional[EventEnvelope]:
        """Dispatch an already-decoded event frame as if it came off the stream.

        Malformed frames are dropped and return None.
        """
        return self._events.dispatch(message)

    # -------------------------------------------------------------------------
    # Resource management
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the event stream, log out if needed, and release the HTTP client."""
        await self._events.close()
        if self.session.is_authenticated and not self._transport.is_closed:
            await self.logout()
        await self._transport.aclose()

    async def __aenter__(self) -> UnifiClient:
        """Enter async context manager. Authentication stays lazy."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager - release all resources."""
        await self.close()
