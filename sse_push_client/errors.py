# =============================================================================
# SSE Push Client -- Error Types
# =============================================================================

from __future__ import annotations

from typing import Any


class SSEPushError(Exception):
    """Base exception for all SSE push client errors."""


class ConfigurationError(SSEPushError):
    """Invalid client setup (empty or malformed URI, partial credentials)."""


class TransportError(SSEPushError):
    """HTTP-level failure reported by the server.

    Raised only inside a transport.  Applications receive the same
    information through the error handler as ``(status_code, response)``.
    """

    def __init__(self, status_code: int, response: Any = None) -> None:
        self.status_code = status_code
        self.response = response
        super().__init__(f"Server responded with HTTP {status_code}")
