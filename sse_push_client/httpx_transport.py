# =============================================================================
# SSE Push Client -- HTTPX Transport
# =============================================================================
#
# Streams text/event-stream over httpx on a background thread with its own
# asyncio loop.  Follows the EventSource model: Last-Event-ID on reconnect,
# server retry hints, non-200 responses fail the stream for good.
# =============================================================================

from __future__ import annotations

import asyncio
import random
import threading

import httpx
from httpx_sse import ServerSentEvent, aconnect_sse

from ._logging import logger
from .constants import (
    CONNECT_TIMEOUT,
    EVENT_STREAM_MEDIA_TYPE,
    JOIN_TIMEOUT,
    LAST_EVENT_ID_HEADER,
    READ_TIMEOUT,
    RECONNECT_ABSOLUTE_CAP,
    RECONNECT_JITTER_RATIO,
    TRANSPORT_THREAD_NAME,
    USER_AGENT,
)
from .errors import TransportError
from .transport import BaseTransport
from .types import ConnectionState, Frame, ReconnectConfig, ReconnectMode


class HttpxTransport(BaseTransport):
    """Default transport: one streaming GET per attempt, reconnect on drop.

    Args:
        url: Event stream URL.
        reconnect: Backoff policy for dropped streams.
        headers: Extra request headers sent on every attempt.
        timeout: ``httpx`` timeout; the read timeout bounds the silence
            allowed between server writes.
        http_transport: Optional ``httpx.AsyncBaseTransport`` (proxies,
            ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        url: str,
        *,
        reconnect: ReconnectConfig | None = None,
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | float | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self._url = url
        self._reconnect_cfg = reconnect or ReconnectConfig()
        self._headers = dict(headers or {})
        self._timeout = (
            timeout
            if timeout is not None
            else httpx.Timeout(READ_TIMEOUT, connect=CONNECT_TIMEOUT)
        )
        self._http_transport = http_transport

        # Stream state
        self._auth: httpx.BasicAuth | None = None
        self._last_event_id = ""
        self._stream_event_id = ""  # decoder id on the current connection
        self._retry_delay: float | None = None  # seconds, from server hint
        self._reconnect_attempts = 0

        # Thread / loop
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self._winding_down = False
        self._restart_pending = False
        self._restart_auth: httpx.BasicAuth | None = None

    # -- Properties -----------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def last_event_id(self) -> str:
        return self._last_event_id

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None

    # -- Start / Stop ---------------------------------------------------------

    def start(self, username: str | None = None, password: str | None = None) -> None:
        """Spawn the streaming thread and return immediately.

        While a previous stream is still winding down (after ``stop()``, a
        failed response or an exhausted reconnect budget) the call is queued
        and the next thread starts once the old one has reported ``CLOSED``.
        This makes it safe to reopen from a close or error handler.
        """
        if username is not None or password is not None:
            auth = httpx.BasicAuth(username or "", password or "")
        else:
            auth = None

        with self._lock:
            if self._thread is None:
                self._spawn_locked(auth)
            elif self._stop_requested or self._winding_down:
                self._restart_pending = True
                self._restart_auth = auth
                logger.debug("Previous stream is closing, restart queued")
            else:
                logger.warning("start() called while the stream is running, ignoring")

    def stop(self) -> None:
        """Request teardown without waiting for it."""
        with self._lock:
            self._stop_requested = True
            self._restart_pending = False
            self._restart_auth = None
            if self._loop is not None and self._task is not None:
                self._loop.call_soon_threadsafe(self._task.cancel)

    def join(self, timeout: float | None = JOIN_TIMEOUT) -> None:
        """Wait for the current streaming thread to exit."""
        with self._lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    # -- Internal: thread -----------------------------------------------------

    def _spawn_locked(self, auth: httpx.BasicAuth | None) -> None:
        # Caller holds self._lock
        self._stop_requested = False
        self._winding_down = False
        self._reconnect_attempts = 0
        self._auth = auth
        self._thread = threading.Thread(
            target=self._run_loop, daemon=True, name=TRANSPORT_THREAD_NAME
        )
        self._thread.start()

    def _begin_shutdown(self) -> None:
        with self._lock:
            self._winding_down = True

    def _run_loop(self) -> None:
        """Background thread: run the stream on a private event loop."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            with self._lock:
                if self._stop_requested:
                    return
                self._loop = loop
                self._task = loop.create_task(self._stream_forever())
            loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            logger.debug("Stream from %s cancelled", self._url)
        except Exception:
            logger.exception("Transport loop error")
        finally:
            with self._lock:
                self._loop = None
                self._task = None
                self._winding_down = True
            try:
                loop.run_until_complete(loop.shutdown_asyncgens())
            finally:
                loop.close()
            self._set_state(ConnectionState.CLOSED)

            with self._lock:
                self._thread = None
                self._winding_down = False
                if self._restart_pending:
                    self._restart_pending = False
                    auth, self._restart_auth = self._restart_auth, None
                    self._spawn_locked(auth)

    # -- Internal: streaming --------------------------------------------------

    async def _stream_forever(self) -> None:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._http_transport
        ) as client:
            while True:
                self._set_state(ConnectionState.CONNECTING)
                if not await self._connect_once(client):
                    return

                delay = self._next_delay()
                if delay is None:
                    self._begin_shutdown()
                    self._set_state(ConnectionState.ERROR)
                    return
                await asyncio.sleep(delay)

    async def _connect_once(self, client: httpx.AsyncClient) -> bool:
        """Run one stream attempt.  Returns True when a reconnect is due."""
        headers = {"User-Agent": USER_AGENT, **self._headers}
        if self._last_event_id:
            headers[LAST_EVENT_ID_HEADER] = self._last_event_id

        try:
            async with aconnect_sse(
                client, "GET", self._url, headers=headers, auth=self._auth
            ) as source:
                try:
                    await self._check_response(source.response)
                except TransportError as exc:
                    self._fail(exc)
                    return False

                self._reconnect_attempts = 0
                self._stream_event_id = ""
                self._set_state(ConnectionState.OPEN)
                async for sse in source.aiter_sse():
                    self._handle_event(sse)
        except httpx.HTTPError as exc:
            logger.warning("Stream from %s interrupted: %s", self._url, exc)
            return True

        logger.debug("Stream from %s ended by server", self._url)
        return True

    async def _check_response(self, response: httpx.Response) -> None:
        if response.status_code != httpx.codes.OK:
            await response.aread()
            raise TransportError(response.status_code, response)

        content_type = response.headers.get("content-type", "").partition(";")[0]
        if EVENT_STREAM_MEDIA_TYPE not in content_type:
            await response.aread()
            logger.error(
                "Expected %s from %s, got %r",
                EVENT_STREAM_MEDIA_TYPE,
                self._url,
                content_type,
            )
            raise TransportError(response.status_code, response)

    def _handle_event(self, sse: ServerSentEvent) -> None:
        # httpx-sse repeats the buffered id on every event and resets it per
        # connection, so only a change on this connection updates ours.
        # An empty "id:" field clears it.
        if sse.id != self._stream_event_id:
            self._stream_event_id = sse.id
            self._last_event_id = sse.id
        if sse.retry is not None:
            self._retry_delay = sse.retry / 1000.0

        self._emit_frame(
            Frame(
                event_type=sse.event,
                data=sse.data,
                last_event_id=self._last_event_id,
                retry=sse.retry,
            )
        )

    def _fail(self, exc: TransportError) -> None:
        """Fail the stream: report ERROR, notify, never reconnect."""
        self._begin_shutdown()
        self._set_state(ConnectionState.ERROR)
        self._emit_error(exc.status_code, exc.response)

    # -- Internal: reconnection -----------------------------------------------

    def _next_delay(self) -> float | None:
        """Delay before the next attempt, or None once the budget is spent."""
        cfg = self._reconnect_cfg
        if cfg.max_attempts >= 0 and self._reconnect_attempts >= cfg.max_attempts:
            logger.error("Max reconnect attempts (%d) reached", cfg.max_attempts)
            return None

        delay = self._calculate_delay()
        self._reconnect_attempts += 1
        logger.info(
            "Reconnecting in %.1fs (attempt %d/%s)",
            delay,
            self._reconnect_attempts,
            cfg.max_attempts if cfg.max_attempts >= 0 else "inf",
        )
        return delay

    def _calculate_delay(self) -> float:
        """Compute reconnect delay based on strategy."""
        cfg = self._reconnect_cfg
        attempt = self._reconnect_attempts
        base = self._retry_delay if self._retry_delay is not None else cfg.base_delay

        if cfg.mode == ReconnectMode.LINEAR:
            delay = base + attempt * 1.0
        elif cfg.mode == ReconnectMode.FIBONACCI:
            delay = base * _fib(min(attempt + 1, 10))
        else:
            delay = base * (cfg.factor**attempt)

        delay = min(delay, cfg.max_delay, RECONNECT_ABSOLUTE_CAP)

        if cfg.jitter:
            jitter_amount = delay * RECONNECT_JITTER_RATIO * (random.random() - 0.5)
            delay = max(0.0, delay + jitter_amount)

        return delay


def _fib(n: int) -> int:
    """Fibonacci number for reconnect delay calculation."""
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a

