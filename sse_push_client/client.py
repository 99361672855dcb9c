# =============================================================================
# SSE Push Client -- Client Facade
# =============================================================================
#
# Primary public API.  Wires a transport to the event registry, the
# connection controller and the error notifier.
# =============================================================================

from __future__ import annotations

from typing import Any, Callable

import httpx

from ._logging import logger
from .connection import ConnectionController
from .constants import ALLOWED_SCHEMES, DEFAULT_EVENT
from .errors import ConfigurationError
from .httpx_transport import HttpxTransport
from .notifier import ErrorNotifier
from .registry import EventRegistry
from .transport import Transport
from .types import (
    Credentials,
    ErrorHandler,
    Frame,
    LifecycleHandler,
    Message,
    MessageHandler,
    ReconnectConfig,
)


class SSEPushClient:
    """Receives Server-Sent Events and dispatches them by event name.

    Args:
        uri: Event stream URL, e.g. ``"https://push.example.com/events"``.
        transport: Stream implementation.  Defaults to
            :class:`~sse_push_client.httpx_transport.HttpxTransport`.
        reconnect: Backoff policy for the default transport.
        headers: Extra request headers for the default transport.
        timeout: ``httpx`` timeout for the default transport.

    Raises:
        ConfigurationError: If *uri* is empty or not an http(s) URL.

    Example::

        client = SSEPushClient("https://push.example.com/events")

        @client.on("alert")
        def handle(message):
            print(message.data)

        client.register_on_open(lambda: print("connected"))
        client.open("user", "secret")
        ...
        client.close()

    Handlers run on the transport thread, one at a time, in the order
    frames arrive.  Keep them short or hand work off.
    """

    def __init__(
        self,
        uri: str | None,
        *,
        transport: Transport | None = None,
        reconnect: ReconnectConfig | None = None,
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> None:
        self._uri = _validate_uri(uri)
        self._registry = EventRegistry()

        if transport is None:
            transport = HttpxTransport(
                self._uri, reconnect=reconnect, headers=headers, timeout=timeout
            )
        self._transport = transport
        self._connection = ConnectionController(transport)
        self._errors = ErrorNotifier(transport)

        # Installed before open(): the transport may emit at any time
        transport.add_frame_listener(self._on_frame)

    # -- Context manager ------------------------------------------------------

    def __enter__(self) -> SSEPushClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # -- Properties -----------------------------------------------------------

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def transport(self) -> Transport:
        return self._transport

    # -- Open / Close ---------------------------------------------------------

    def open(self, username: str | None = None, password: str | None = None) -> None:
        """Start receiving.  Pass both credentials for Basic auth, or neither.

        Returns without waiting for the connection; use
        :meth:`register_on_open` to learn when the stream is up.

        Raises:
            ConfigurationError: If only one of *username* / *password* is set.
        """
        self._connection.open(Credentials.from_pair(username, password))

    def close(self) -> None:
        """Stop receiving.  Safe to call any number of times."""
        self._connection.close()

    # -- Handler registration -------------------------------------------------

    def register_on_open(self, handler: LifecycleHandler) -> None:
        logger.debug("register_on_open()")
        self._connection.add_open_handler(handler)

    def register_on_close(self, handler: LifecycleHandler) -> None:
        logger.debug("register_on_close()")
        self._connection.add_close_handler(handler)

    def register_on_error(self, handler: ErrorHandler) -> None:
        """Set the handler for HTTP errors, replacing any previous one."""
        logger.debug("register_on_error()")
        self._errors.register(handler)

    def register_event(
        self,
        name: str | MessageHandler,
        handler: MessageHandler | None = None,
    ) -> None:
        """Register the handler for an event name.

        ``register_event("alert", fn)`` handles ``event: alert`` frames;
        ``register_event(fn)`` handles unnamed frames (``"message"``).
        A later registration for the same name replaces the earlier one.
        """
        if handler is None:
            if not callable(name):
                raise TypeError("register_event() needs a handler")
            self._registry.register_default(name)
            logger.debug("register_event() event=%s", DEFAULT_EVENT)
            return

        self._registry.register(name, handler)
        logger.debug("register_event() event=%s", name)

    def on(
        self, event: str = DEFAULT_EVENT
    ) -> Callable[[MessageHandler], MessageHandler]:
        """Decorator form of :meth:`register_event`."""

        def decorator(fn: MessageHandler) -> MessageHandler:
            self.register_event(event, fn)
            return fn

        return decorator

    # -- Internal -------------------------------------------------------------

    def _on_frame(self, frame: Frame) -> None:
        """Transport frame listener: resolve, build the Message, dispatch."""
        event_type = frame.event_type or DEFAULT_EVENT
        handler = self._registry.resolve(event_type)
        if handler is None:
            logger.debug("No handler for event '%s', dropping frame", event_type)
            return

        message = Message(
            event_type=event_type,
            data=frame.data or "",
            last_event_id=frame.last_event_id or "",
            retry=str(frame.retry) if frame.retry is not None else None,
        )
        try:
            handler(message)
        except Exception:
            logger.exception("Handler error for '%s'", event_type)


def _validate_uri(uri: str | None) -> str:
    if not uri:
        raise ConfigurationError("Server URI must not be empty")
    if not isinstance(uri, str):
        raise ConfigurationError(f"Server URI must be a string, got {type(uri).__name__}")

    try:
        url = httpx.URL(uri)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Invalid server URI {uri!r}: {exc}") from exc

    if url.scheme not in ALLOWED_SCHEMES or not url.host:
        raise ConfigurationError(f"Server URI must be an absolute http(s) URL: {uri!r}")
    return uri
