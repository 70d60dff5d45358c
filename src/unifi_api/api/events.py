"""Observer registry used by UnifiClient to publish notifications.

Handlers are registered per event name and may be plain callables or
coroutine functions. Coroutine results are scheduled as tasks on the running
loop; a handler that raises is logged and does not prevent delivery to the
remaining handlers.

Example usage:
    channel = EventChannel()

    @channel.on("client.connected")
    def announce(data):
        print(data["mac"])

    channel.emit("client.connected", {"mac": "aa:bb:cc:dd:ee:ff"})
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Coroutine
from typing import Any, Callable, Optional, Union

import structlog

from unifi_api.models import ClientEvent

logger = structlog.get_logger(__name__)

Handler = Callable[..., Union[None, Awaitable[None]]]
EventName = Union[str, ClientEvent]


def _key(name: EventName) -> str:
    return name.value if isinstance(name, ClientEvent) else name


class _Once:
    """One-shot registration wrapping the subscriber's handler."""

    __slots__ = ("handler",)

    def __init__(self, handler: Handler) -> None:
        self.handler = handler


Entry = Union[Handler, _Once]


def _target(entry: Entry) -> Handler:
    return entry.handler if isinstance(entry, _Once) else entry


class EventChannel:
    """Named-event observer registry.

    The same callable may be registered several times, with on() or once();
    each registration is delivered and removed independently.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[Entry]] = defaultdict(list)
        self._background_tasks: set[asyncio.Task[Any]] = set()

    def on(self, name: EventName, handler: Optional[Handler] = None) -> Any:
        """Register a handler for ``name``.

        Can be called directly (``channel.on("error", fn)``) or used as a
        decorator (``@channel.on("error")``).
        """
        if handler is None:

            def decorator(fn: Handler) -> Handler:
                self._handlers[_key(name)].append(fn)
                return fn

            return decorator

        self._handlers[_key(name)].append(handler)
        return handler

    def once(self, name: EventName, handler: Handler) -> Handler:
        """Register a handler that is removed after its first delivery."""
        self._handlers[_key(name)].append(_Once(handler))
        return handler

    def off(self, name: EventName, handler: Handler) -> None:
        """Remove the most recent registration of ``handler``; unknown handlers are ignored."""
        entries = self._handlers.get(_key(name), [])
        for index in range(len(entries) - 1, -1, -1):
            if _target(entries[index]) == handler:
                del entries[index]
                return

    def _discard(self, key: str, entry: _Once) -> bool:
        """Drop one exact one-shot entry; False if it is already gone."""
        entries = self._handlers.get(key, [])
        for index, candidate in enumerate(entries):
            if candidate is entry:
                del entries[index]
                return True
        return False

    def remove_all(self, name: Optional[EventName] = None) -> None:
        """Drop every handler for ``name``, or for all events."""
        if name is None:
            self._handlers.clear()
            return
        self._handlers.pop(_key(name), None)

    def listener_count(self, name: EventName) -> int:
        """Number of handlers registered for ``name``."""
        return len(self._handlers.get(_key(name), []))

    def emit(self, name: EventName, *args: Any) -> bool:
        """Deliver ``args`` to every handler registered for ``name``.

        Returns:
            True if at least one handler was registered.
        """
        key = _key(name)
        entries = list(self._handlers.get(key, []))
        if not entries:
            if key == ClientEvent.ERROR.value and args:
                logger.warning("unhandled_error_event", error=str(args[0]))
            return False

        for entry in entries:
            if isinstance(entry, _Once):
                # Already delivered by a nested emit, or removed with off()
                if not self._discard(key, entry):
                    continue
            handler = _target(entry)
            try:
                result = handler(*args)
                if asyncio.iscoroutine(result):
                    self._fire_task(result)
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    event_name=key,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return True

    def _fire_task(self, coro: Coroutine[Any, Any, Any]) -> None:
        """Schedule a coroutine handler, keeping a strong reference until done.

        Outside a running loop the coroutine is closed unstarted.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning(
                "coroutine_handler_skipped",
                handler=getattr(coro, "__qualname__", repr(coro)),
                reason="no running event loop",
            )
            return
        task = loop.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
