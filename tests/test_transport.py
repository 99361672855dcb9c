"""Tests for the transport contract and BaseTransport plumbing."""

import pytest

from sse_push_client.httpx_transport import HttpxTransport
from sse_push_client.transport import BaseTransport, Transport
from sse_push_client.types import ConnectionState, Frame

from tests.conftest import TEST_URI, FakeTransport


class TestProtocol:
    def test_fake_transport_satisfies_protocol(self):
        assert isinstance(FakeTransport(), Transport)

    def test_httpx_transport_satisfies_protocol(self):
        assert isinstance(HttpxTransport(TEST_URI), Transport)

    def test_base_requires_start_stop(self):
        base = BaseTransport()
        with pytest.raises(NotImplementedError):
            base.start()
        with pytest.raises(NotImplementedError):
            base.stop()


class TestBaseTransport:
    def test_initial_state_closed(self):
        assert FakeTransport().state == ConnectionState.CLOSED

    def test_state_change_notifies(self):
        t = FakeTransport()
        states = []
        t.add_state_listener(states.append)
        t.set_state(ConnectionState.CONNECTING)
        t.set_state(ConnectionState.OPEN)
        assert states == [ConnectionState.CONNECTING, ConnectionState.OPEN]
        assert t.state == ConnectionState.OPEN

    def test_same_state_not_repeated(self):
        t = FakeTransport()
        states = []
        t.add_state_listener(states.append)
        t.set_state(ConnectionState.OPEN)
        t.set_state(ConnectionState.OPEN)
        assert states == [ConnectionState.OPEN]

    def test_listener_failure_contained(self):
        t = FakeTransport()
        frames = []

        def boom(frame):
            raise RuntimeError("listener failure")

        t.add_frame_listener(boom)
        t.add_frame_listener(frames.append)
        t.deliver(event_type="alert", data="x")

        assert frames == [Frame(event_type="alert", data="x")]

    def test_error_without_callback(self):
        t = FakeTransport()
        # Should not raise
        t.fail(500)

    def test_error_callback_replaced(self):
        t = FakeTransport()
        first, second = [], []
        t.set_error_callback(lambda s, r: first.append(s))
        t.set_error_callback(lambda s, r: second.append(s))
        t.fail(502)
        assert first == []
        assert second == [502]
