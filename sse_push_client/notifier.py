# =============================================================================
# SSE Push Client -- Error Notifier
# =============================================================================

from __future__ import annotations

import threading
from typing import Any

from ._logging import logger
from .transport import Transport
from .types import ErrorHandler


class ErrorNotifier:
    """Routes HTTP-level transport failures to the application.

    Holds a single handler slot: registering again replaces the previous
    handler.  Without a handler, failures only reach the log.
    """

    def __init__(self, transport: Transport) -> None:
        self._handler: ErrorHandler | None = None
        self._lock = threading.Lock()
        transport.set_error_callback(self.on_transport_error)

    def register(self, handler: ErrorHandler | None) -> None:
        with self._lock:
            self._handler = handler

    @property
    def has_handler(self) -> bool:
        with self._lock:
            return self._handler is not None

    def on_transport_error(self, status_code: int, response: Any) -> None:
        logger.warning("Error response: status=%s response=%r", status_code, response)

        with self._lock:
            handler = self._handler
        if handler is None:
            return
        try:
            handler(status_code, response)
        except Exception:
            logger.exception("Error handler failed for HTTP %s", status_code)
