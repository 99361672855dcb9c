"""Server-Sent Events push client with per-event handler dispatch.

Usage::

    from sse_push_client import SSEPushClient

    client = SSEPushClient("https://push.example.com/events")
    client.register_event("alert", lambda m: print(m.event_type, m.data))
    client.register_event(lambda m: print("unnamed:", m.data))
    client.register_on_open(lambda: print("open"))
    client.register_on_close(lambda: print("closed"))
    client.register_on_error(lambda status, response: print("HTTP", status))

    client.open()                  # anonymous
    client.open("user", "secret")  # or Basic auth
    ...
    client.close()

Handlers run synchronously on the transport thread.
"""

from ._version import __version__
from .client import SSEPushClient
from .connection import ConnectionController
from .errors import ConfigurationError, SSEPushError, TransportError
from .httpx_transport import HttpxTransport
from .notifier import ErrorNotifier
from .registry import EventRegistry
from .transport import BaseTransport, Transport
from .types import (
    ConnectionState,
    Credentials,
    Frame,
    Message,
    ReconnectConfig,
    ReconnectMode,
)

__all__ = [
    "__version__",
    "SSEPushClient",
    "EventRegistry",
    "ConnectionController",
    "ErrorNotifier",
    "Transport",
    "BaseTransport",
    "HttpxTransport",
    "Message",
    "Frame",
    "Credentials",
    "ConnectionState",
    "ReconnectConfig",
    "ReconnectMode",
    "SSEPushError",
    "ConfigurationError",
    "TransportError",
]
