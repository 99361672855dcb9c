# =============================================================================
# SSE Push Client -- Connection Controller
# =============================================================================
#
# Owns the transport handle.  open()/close() only request a transition;
# OPEN and CLOSED notifications fan out to lifecycle handlers in
# registration order on the transport's delivery thread.
# =============================================================================

from __future__ import annotations

import threading

from ._logging import logger
from .transport import Transport
from .types import ConnectionState, Credentials, LifecycleHandler


class ConnectionController:
    """Mediates open/close and forwards lifecycle transitions.

    Handlers added after a transition are not replayed for it.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._open_handlers: list[LifecycleHandler] = []
        self._close_handlers: list[LifecycleHandler] = []
        self._lock = threading.Lock()
        transport.add_state_listener(self._on_state_change)

    @property
    def transport(self) -> Transport:
        return self._transport

    # -- Open / Close ---------------------------------------------------------

    def open(self, credentials: Credentials | None = None) -> None:
        """Ask the transport to start streaming; does not wait for OPEN."""
        if credentials is None:
            logger.debug("open() <start> anonymous")
            self._transport.start(None, None)
        else:
            logger.debug("open() <start> username=%s", credentials.username)
            self._transport.start(credentials.username, credentials.password)
        logger.debug("open() <end>")

    def close(self) -> None:
        logger.debug("close() <start>")
        self._transport.stop()
        logger.debug("close() <end>")

    # -- Lifecycle handlers ---------------------------------------------------

    def add_open_handler(self, handler: LifecycleHandler) -> None:
        with self._lock:
            self._open_handlers.append(handler)

    def add_close_handler(self, handler: LifecycleHandler) -> None:
        with self._lock:
            self._close_handlers.append(handler)

    def _on_state_change(self, state: ConnectionState) -> None:
        with self._lock:
            if state == ConnectionState.OPEN:
                handlers = list(self._open_handlers)
            elif state == ConnectionState.CLOSED:
                handlers = list(self._close_handlers)
            else:
                return

        for handler in handlers:
            try:
                handler()
            except Exception:
                logger.exception("%s handler failed", state.value)
