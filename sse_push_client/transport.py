# =============================================================================
# SSE Push Client -- Transport Contract
# =============================================================================
#
# The transport owns the HTTP stream and its state machine.  The client only
# subscribes to it: state changes, parsed frames, and HTTP-level errors.
# =============================================================================

from __future__ import annotations

import threading
from typing import Any, Callable, Protocol, runtime_checkable

from ._logging import logger
from .types import ConnectionState, ErrorHandler, Frame

StateListener = Callable[[ConnectionState], Any]
FrameListener = Callable[[Frame], Any]


@runtime_checkable
class Transport(Protocol):
    """What :class:`~sse_push_client.SSEPushClient` needs from a transport."""

    def start(self, username: str | None = None, password: str | None = None) -> None:
        """Begin streaming.  Must return without waiting for the stream."""
        ...

    def stop(self) -> None:
        """End streaming.  Must be safe to call repeatedly."""
        ...

    def add_state_listener(self, listener: StateListener) -> None: ...

    def add_frame_listener(self, listener: FrameListener) -> None: ...

    def set_error_callback(self, callback: ErrorHandler | None) -> None: ...


class BaseTransport:
    """Listener plumbing shared by transports.

    Subclasses implement :meth:`start` / :meth:`stop` and call
    :meth:`_set_state`, :meth:`_emit_frame` and :meth:`_emit_error` from
    their I/O thread.  Listeners run synchronously on that thread.
    """

    def __init__(self) -> None:
        self._state = ConnectionState.CLOSED
        self._state_listeners: list[StateListener] = []
        self._frame_listeners: list[FrameListener] = []
        self._error_callback: ErrorHandler | None = None
        self._listener_lock = threading.Lock()

    # -- Transport protocol ---------------------------------------------------

    def start(self, username: str | None = None, password: str | None = None) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    def add_state_listener(self, listener: StateListener) -> None:
        with self._listener_lock:
            self._state_listeners.append(listener)

    def add_frame_listener(self, listener: FrameListener) -> None:
        with self._listener_lock:
            self._frame_listeners.append(listener)

    def set_error_callback(self, callback: ErrorHandler | None) -> None:
        with self._listener_lock:
            self._error_callback = callback

    @property
    def state(self) -> ConnectionState:
        return self._state

    # -- Emission -------------------------------------------------------------

    def _set_state(self, new_state: ConnectionState) -> None:
        if new_state == self._state:
            return
        old = self._state
        self._state = new_state
        logger.debug("State: %s -> %s", old.value, new_state.value)
        with self._listener_lock:
            listeners = list(self._state_listeners)
        for listener in listeners:
            try:
                listener(new_state)
            except Exception:
                logger.exception("State listener failed on %s", new_state.value)

    def _emit_frame(self, frame: Frame) -> None:
        with self._listener_lock:
            listeners = list(self._frame_listeners)
        for listener in listeners:
            try:
                listener(frame)
            except Exception:
                logger.exception("Frame listener failed for '%s'", frame.event_type)

    def _emit_error(self, status_code: int, response: Any) -> None:
        with self._listener_lock:
            callback = self._error_callback
        if callback is None:
            return
        try:
            callback(status_code, response)
        except Exception:
            logger.exception("Error callback failed for HTTP %s", status_code)
