# =============================================================================
# SSE Push Client -- Type Definitions
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .constants import (
    RECONNECT_BASE_DELAY,
    RECONNECT_FACTOR,
    RECONNECT_MAX_ATTEMPTS,
    RECONNECT_MAX_DELAY,
)
from .errors import ConfigurationError


class ConnectionState(str, Enum):
    """Stream connection state as reported by the transport.

    Typical flow: CLOSED -> CONNECTING -> OPEN -> CONNECTING (reconnect)
    ... -> CLOSED.  ERROR is reported just before a failed stream closes.
    """

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERROR = "error"


class ReconnectMode(str, Enum):
    """Backoff strategy used by the transport between stream attempts."""

    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIBONACCI = "fibonacci"


@dataclass(frozen=True, slots=True)
class Frame:
    """One parsed event-stream block, as produced by a transport.

    Attributes:
        event_type: ``event:`` field, ``None`` or ``""`` when absent.
        data: Joined ``data:`` lines.
        last_event_id: Current last-event-id buffer of the stream.
        retry: ``retry:`` field in milliseconds when it was numeric.
    """

    event_type: str | None = None
    data: str = ""
    last_event_id: str = ""
    retry: int | None = None


@dataclass(frozen=True, slots=True)
class Message:
    """An event delivered to an application handler.

    Attributes:
        event_type: Resolved event name, ``"message"`` for unnamed events.
        data: Payload text, possibly empty.
        last_event_id: Server-supplied cursor, possibly empty.
        retry: Reconnection hint in milliseconds, as text, or ``None``.
    """

    event_type: str
    data: str = ""
    last_event_id: str = ""
    retry: str | None = None


@dataclass(frozen=True, slots=True)
class Credentials:
    """Basic-Auth username/password pair."""

    username: str
    password: str

    @classmethod
    def from_pair(
        cls, username: str | None, password: str | None
    ) -> Credentials | None:
        """Build credentials, or ``None`` for anonymous access.

        Raises:
            ConfigurationError: If only one of the two values is given.
        """
        if username is None and password is None:
            return None
        if username is None or password is None:
            raise ConfigurationError(
                "username and password must be given together or not at all"
            )
        return cls(username, password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass
class ReconnectConfig:
    """Configuration for re-establishing a dropped stream.

    Attributes:
        mode: Backoff strategy (default: exponential).
        base_delay: Initial delay in seconds.  A ``retry:`` hint from the
            server replaces it.
        max_delay: Maximum delay cap in seconds.
        max_attempts: Retries per outage, ``-1`` for infinite, ``0`` to
            never reconnect.
        factor: Multiplier per attempt for exponential backoff.
        jitter: Randomize delays to avoid thundering herd.
    """

    mode: ReconnectMode = ReconnectMode.EXPONENTIAL
    base_delay: float = RECONNECT_BASE_DELAY
    max_delay: float = RECONNECT_MAX_DELAY
    max_attempts: int = RECONNECT_MAX_ATTEMPTS
    factor: float = RECONNECT_FACTOR
    jitter: bool = True


# Handler signatures
MessageHandler = Callable[[Message], Any]
LifecycleHandler = Callable[[], Any]
ErrorHandler = Callable[[int, Any], Any]
