"""WebSocket event stream for real-time UniFi notifications.

The controller pushes JSON frames shaped like
``{"meta": {"message": "sta:connect", ...}, "data": ...}`` over
``wss://<host>:<port>/wss/s/<site>/events``. EventStream owns the single
connection per client, decodes frames into EventEnvelope objects and fans
them out through the client's EventChannel:

- recognised tags become named notifications (``client.connected``...)
- any other tag becomes a generic ``event`` notification
- every decoded frame is also emitted verbatim as ``raw_event``

Malformed frames never end the stream. No reconnection is attempted; a closed
stream is reported via ``events.disconnected`` and reconnecting is up to the
caller.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import ssl
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import structlog
import websockets

from unifi_api.config import ControllerConfig
from unifi_api.exceptions import ConnectionError, EventParseError
from unifi_api.models import ClientEvent, StreamState

from .events import EventChannel
from .session import SessionState

if TYPE_CHECKING:
    from websockets.asyncio.client import ClientConnection

logger = structlog.get_logger(__name__)

# Controller tags with a dedicated notification. Both the colon form sent by
# the Network application and the hyphenated aliases are accepted.
EVENT_ROUTES: Dict[str, ClientEvent] = {
    "sta:connect": ClientEvent.CLIENT_CONNECTED,
    "station-connect": ClientEvent.CLIENT_CONNECTED,
    "sta:disconnect": ClientEvent.CLIENT_DISCONNECTED,
    "station-disconnect": ClientEvent.CLIENT_DISCONNECTED,
    "ap:detected": ClientEvent.DEVICE_DETECTED,
    "ap-detected": ClientEvent.DEVICE_DETECTED,
    "ap:lost": ClientEvent.DEVICE_LOST,
    "ap-lost": ClientEvent.DEVICE_LOST,
}


@dataclass
class EventEnvelope:
    """A decoded frame from the UniFi event stream.

    Attributes:
        event_type: The ``meta.message`` tag (e.g. "sta:connect").
        data: The frame's payload; ``{}`` when the frame carried none.
        product_line: Optional ``meta.product_line`` (e.g. "network").
        raw: The frame exactly as decoded.
    """

    event_type: str
    data: Any = field(default_factory=dict)
    product_line: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def parse_event_envelope(message: Any) -> Optional[EventEnvelope]:
    """Build an EventEnvelope from a decoded frame.

    Returns None (drop) when the frame is not an object, its ``meta`` section
    is missing or not an object, or ``meta.message`` is not a non-empty string.
    """
    if not isinstance(message, dict):
        return None

    meta = message.get("meta")
    if not isinstance(meta, dict):
        return None

    event_type = meta.get("message")
    if not isinstance(event_type, str) or not event_type:
        return None

    data = message.get("data")
    product_line = meta.get("product_line")
    return EventEnvelope(
        event_type=event_type,
        data=data if data is not None else {},
        product_line=product_line if isinstance(product_line, str) else None,
        raw=message,
    )


def route_event(envelope: EventEnvelope) -> Tuple[ClientEvent, Any]:
    """Map an envelope to the notification name and payload to emit."""
    target = EVENT_ROUTES.get(envelope.event_type)
    if target is not None:
        return target, envelope.data
    return ClientEvent.EVENT, {"type": envelope.event_type, "data": envelope.data}


class EventStream:
    """Owner of the persistent event connection for one UnifiClient.

    States: DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED.
    At most one connection is open at a time.

    Example:
        stream = EventStream(config, session, channel, "/wss/s/{site}/events")
        await stream.open()
        ...
        await stream.close()
    """

    def __init__(
        self,
        config: ControllerConfig,
        session: SessionState,
        channel: EventChannel,
        path_template: str,
    ) -> None:
        """Initialize the stream.

        Args:
            config: Connection configuration (host, port, site, TLS flags).
            session: Session state supplying the cookie credential.
            channel: Where notifications are published.
            path_template: Event socket path with a ``{site}`` placeholder.
        """
        self._config = config
        self._session = session
        self._channel = channel
        self._path_template = path_template
        self._ws: Optional[ClientConnection] = None
        self._state = StreamState.DISCONNECTED
        self._pending: Optional[asyncio.Future[bool]] = None
        self._listener: Optional[asyncio.Task[None]] = None

    @property
    def endpoint(self) -> str:
        """WebSocket URL of the site's event stream."""
        base = self._config.base_url.rstrip("/")
        ws_base = base.replace("https://", "wss://", 1).replace("http://", "ws://", 1)
        return f"{ws_base}{self._path_template.format(site=self._config.site)}"

    @property
    def state(self) -> StreamState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Whether the event connection is open."""
        return self._ws is not None and self._state == StreamState.CONNECTED

    def _get_ssl_context(self) -> Optional[ssl.SSLContext]:
        """SSL context for wss:// connections, honouring strict_ssl."""
        if not self._config.ssl:
            return None
        ctx = ssl.create_default_context()
        if not self._config.strict_ssl:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        return ctx

    async def open(self) -> bool:
        """Open the event connection, or reuse the one already open.

        Concurrent callers while a connection attempt is in flight share
        that attempt.

        Returns:
            True once the connection is open.

        Raises:
            ConnectionError: The connection failed before reaching the open state.
        """
        if self.is_connected:
            return True

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect())
            self._pending.add_done_callback(self._clear_pending)

        return await asyncio.shield(self._pending)

    def _clear_pending(self, _future: asyncio.Future[bool]) -> None:
        self._pending = None

    async def _connect(self) -> bool:
        """Perform one connection attempt."""
        self._state = StreamState.CONNECTING
        endpoint = self.endpoint
        connect_kwargs: Dict[str, Any] = {
            "additional_headers": {"Cookie": self._session.cookies},
        }
        ssl_context = self._get_ssl_context()
        if ssl_context is not None:
            connect_kwargs["ssl"] = ssl_context

        logger.debug("websocket_connecting", endpoint=endpoint)

        try:
            ws = await websockets.connect(endpoint, **connect_kwargs)
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            self._state = StreamState.DISCONNECTED
            logger.warning(
                "websocket_connection_failed",
                endpoint=endpoint,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._channel.emit(ClientEvent.ERROR, e)
            raise ConnectionError(
                message=f"Cannot open event stream at {endpoint}: {e}",
                target=endpoint,
            ) from e

        self._ws = ws
        self._state = StreamState.CONNECTED
        self._listener = asyncio.create_task(self._listen(ws), name="unifi-events")
        logger.info("websocket_connected", endpoint=endpoint)
        self._channel.emit(ClientEvent.EVENTS_CONNECTED)
        return True

    async def _listen(self, ws: ClientConnection) -> None:
        """Receive frames until the connection closes."""
        try:
            async for message in ws:
                self.handle_message(message)
        except websockets.exceptions.ConnectionClosedError as e:
            logger.warning("websocket_disconnected", code=e.code, reason=e.reason)
            self._channel.emit(ClientEvent.ERROR, e)
        except Exception as e:
            logger.error("websocket_error", error=str(e), error_type=type(e).__name__)
            self._channel.emit(ClientEvent.ERROR, e)
        finally:
            self._on_closed(ws)

    def _on_closed(self, ws: ClientConnection) -> None:
        """Forget the closed connection and announce it."""
        if self._ws is not None and self._ws is not ws:
            # A newer connection replaced this one
            return
        self._ws = None
        self._state = StreamState.DISCONNECTED
        logger.info("websocket_closed")
        self._channel.emit(ClientEvent.EVENTS_DISCONNECTED)

    def handle_message(self, raw_message: Any) -> None:
        """Decode one frame and dispatch it; decoding errors are reported, not raised."""
        try:
            message = json.loads(raw_message)
        except (ValueError, TypeError) as e:
            logger.warning("websocket_invalid_json", message=str(raw_message)[:100])
            self._channel.emit(ClientEvent.ERROR, EventParseError(str(e)))
            return

        self.dispatch(message)

    def dispatch(self, message: Any) -> Optional[EventEnvelope]:
        """Emit the notifications for an already-decoded frame.

        Returns:
            The parsed envelope, or None when the frame was dropped.
        """
        envelope = parse_event_envelope(message)
        if envelope is None:
            logger.debug("event_dropped", reason="missing meta.message")
            return None

        name, payload = route_event(envelope)
        logger.debug("event_received", event_type=envelope.event_type, notification=name.value)
        self._channel.emit(name, payload)
        self._channel.emit(ClientEvent.RAW_EVENT, envelope.raw)
        return envelope

    async def close(self) -> None:
        """Close the connection if open; safe to call repeatedly.

        An attempt still in flight is allowed to finish first so the socket
        it produces is closed here rather than left open.
        """
        pending = self._pending
        if pending is not None:
            # wait() neither raises the attempt's error nor cancels it
            await asyncio.wait({pending})

        ws = self._ws
        if ws is None:
            return

        listener = self._listener
        self._listener = None
        self._ws = None
        self._state = StreamState.DISCONNECTED

        with contextlib.suppress(Exception):
            await ws.close()

        # The listener announces the closure once its receive loop ends
        if listener is not None and listener is not asyncio.current_task():
            await listener
        logger.debug("websocket_stopped")
