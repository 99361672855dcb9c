# =============================================================================
# SSE Push Client -- Event Registry
# =============================================================================

from __future__ import annotations

import threading

from .constants import DEFAULT_EVENT
from .types import MessageHandler


class EventRegistry:
    """Maps event names to a single handler each.

    Registration replaces any earlier handler for the same name.  Names are
    case-sensitive; ``""`` is a literal key, only :meth:`resolve` maps an
    empty frame name to ``"message"``.  Every read and write holds the
    registry lock, so registration may race with delivery.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, MessageHandler] = {}
        self._lock = threading.Lock()

    def register(self, name: str, handler: MessageHandler) -> None:
        with self._lock:
            self._handlers[name] = handler

    def register_default(self, handler: MessageHandler) -> None:
        self.register(DEFAULT_EVENT, handler)

    def resolve(self, name: str | None) -> MessageHandler | None:
        """Return the handler for a frame's event name, or ``None``."""
        key = name or DEFAULT_EVENT
        with self._lock:
            return self._handlers.get(key)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._handlers

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
