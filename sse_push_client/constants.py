# =============================================================================
# SSE Push Client -- Protocol Constants
# =============================================================================
#
# Header names and the default event name follow the WHATWG EventSource
# processing model.
# =============================================================================

from ._version import __version__

USER_AGENT = f"sse-push-client/{__version__}"

# -- Events -------------------------------------------------------------------

DEFAULT_EVENT = "message"

# -- HTTP ---------------------------------------------------------------------

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
LAST_EVENT_ID_HEADER = "Last-Event-ID"
ALLOWED_SCHEMES = ("http", "https")

# -- Timing (seconds) --------------------------------------------------------

CONNECT_TIMEOUT = 10.0
READ_TIMEOUT = 300.0  # long-lived stream, server heartbeats expected
JOIN_TIMEOUT = 5.0

# -- Reconnection -------------------------------------------------------------

RECONNECT_BASE_DELAY = 3.0  # EventSource default reconnection time
RECONNECT_MAX_DELAY = 30.0
RECONNECT_MAX_ATTEMPTS = -1  # -1 = infinite
RECONNECT_FACTOR = 1.5
RECONNECT_ABSOLUTE_CAP = 300.0  # 5 minutes
RECONNECT_JITTER_RATIO = 0.2

# -- Threads ------------------------------------------------------------------

TRANSPORT_THREAD_NAME = "sse-transport"
