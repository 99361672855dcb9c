"""Shared fixtures for SSE push client tests."""

import pytest

from sse_push_client.client import SSEPushClient
from sse_push_client.transport import BaseTransport
from sse_push_client.types import ConnectionState, Frame

TEST_URI = "http://localhost:8080/events"


class FakeTransport(BaseTransport):
    """In-memory transport: tests drive state, frames and errors by hand."""

    def __init__(self):
        super().__init__()
        self.start_calls = []
        self.stop_calls = 0

    def start(self, username=None, password=None):
        self.start_calls.append((username, password))

    def stop(self):
        self.stop_calls += 1

    # -- Test drivers ---------------------------------------------------------

    def set_state(self, state: ConnectionState):
        self._set_state(state)

    def deliver(self, event_type=None, data="", last_event_id="", retry=None):
        self._emit_frame(
            Frame(
                event_type=event_type,
                data=data,
                last_event_id=last_event_id,
                retry=retry,
            )
        )

    def fail(self, status_code, response=None):
        self._emit_error(status_code, response)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return SSEPushClient(TEST_URI, transport=transport)
