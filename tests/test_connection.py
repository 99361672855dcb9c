"""Tests for the connection controller."""

from unittest.mock import MagicMock

from sse_push_client.connection import ConnectionController
from sse_push_client.types import ConnectionState, Credentials


class TestOpenClose:
    def test_open_anonymous(self, transport):
        ctl = ConnectionController(transport)
        ctl.open()
        assert transport.start_calls == [(None, None)]

    def test_open_with_credentials(self, transport):
        ctl = ConnectionController(transport)
        ctl.open(Credentials("user", "secret"))
        assert transport.start_calls == [("user", "secret")]

    def test_open_does_not_wait_for_open_state(self, transport):
        ctl = ConnectionController(transport)
        ctl.open()
        assert transport.state == ConnectionState.CLOSED

    def test_open_twice_delegates_twice(self, transport):
        ctl = ConnectionController(transport)
        ctl.open()
        ctl.open()
        assert len(transport.start_calls) == 2

    def test_close_delegates(self, transport):
        ctl = ConnectionController(transport)
        ctl.close()
        ctl.close()
        assert transport.stop_calls == 2

    def test_works_with_mock_transport(self):
        mock = MagicMock()
        ctl = ConnectionController(mock)
        mock.add_state_listener.assert_called_once()
        ctl.open(Credentials("u", "p"))
        mock.start.assert_called_once_with("u", "p")
        ctl.close()
        mock.stop.assert_called_once_with()


class TestLifecycleHandlers:
    def test_open_handlers_in_registration_order(self, transport):
        ctl = ConnectionController(transport)
        calls = []
        ctl.add_open_handler(lambda: calls.append("first"))
        ctl.add_open_handler(lambda: calls.append("second"))
        ctl.add_open_handler(lambda: calls.append("third"))

        transport.set_state(ConnectionState.CONNECTING)
        transport.set_state(ConnectionState.OPEN)

        assert calls == ["first", "second", "third"]

    def test_close_handlers_fire_on_closed_only(self, transport):
        ctl = ConnectionController(transport)
        opened, closed = [], []
        ctl.add_open_handler(lambda: opened.append(1))
        ctl.add_close_handler(lambda: closed.append(1))

        transport.set_state(ConnectionState.CONNECTING)
        assert opened == [] and closed == []
        transport.set_state(ConnectionState.OPEN)
        assert opened == [1] and closed == []
        transport.set_state(ConnectionState.CLOSED)
        assert opened == [1] and closed == [1]

    def test_error_state_not_forwarded(self, transport):
        ctl = ConnectionController(transport)
        calls = []
        ctl.add_open_handler(lambda: calls.append("open"))
        ctl.add_close_handler(lambda: calls.append("close"))

        transport.set_state(ConnectionState.ERROR)

        assert calls == []

    def test_late_handler_gets_no_replay(self, transport):
        ctl = ConnectionController(transport)
        early, late = [], []
        ctl.add_open_handler(lambda: early.append(1))
        transport.set_state(ConnectionState.OPEN)

        ctl.add_open_handler(lambda: late.append(1))

        assert early == [1]
        assert late == []

    def test_late_handler_fires_on_next_transition(self, transport):
        ctl = ConnectionController(transport)
        late = []
        transport.set_state(ConnectionState.OPEN)
        ctl.add_open_handler(lambda: late.append(1))

        transport.set_state(ConnectionState.CONNECTING)
        transport.set_state(ConnectionState.OPEN)

        assert late == [1]

    def test_failing_handler_does_not_block_others(self, transport):
        ctl = ConnectionController(transport)
        calls = []

        def boom():
            raise RuntimeError("handler failure")

        ctl.add_open_handler(boom)
        ctl.add_open_handler(lambda: calls.append("after"))

        transport.set_state(ConnectionState.OPEN)

        assert calls == ["after"]

    def test_handler_may_register_during_dispatch(self, transport):
        ctl = ConnectionController(transport)
        calls = []

        def first():
            calls.append("first")
            ctl.add_open_handler(lambda: calls.append("added"))

        ctl.add_open_handler(first)
        transport.set_state(ConnectionState.OPEN)

        assert calls == ["first"]
