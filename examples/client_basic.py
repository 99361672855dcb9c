"""Minimal SSE push client.

Connects to an event stream, prints named and unnamed events, and exits
on Ctrl+C.

    pip install -e .

    # Anonymous stream
    python examples/client_basic.py --url http://localhost:8080/events

    # Basic auth, listen for "alert" events as well
    python examples/client_basic.py --url https://push.example.com/events \
        --username user --password secret --events alert,status
"""

import argparse
import logging
import threading

from sse_push_client import SSEPushClient


def main(url: str, events: list[str], username: str | None, password: str | None):
    stop = threading.Event()

    with SSEPushClient(url) as client:
        client.register_on_open(lambda: print(f"Connected to {url}"))
        client.register_on_close(lambda: print("Disconnected"))
        client.register_on_error(
            lambda status, response: print(f"HTTP {status}: {response.text[:200]}")
        )

        client.register_event(lambda m: print(f"[message] {m.data}"))
        for name in events:
            client.register_event(
                name, lambda m: print(f"[{m.event_type}] id={m.last_event_id} {m.data}")
            )

        client.open(username, password)
        print("Listening for events... (Ctrl+C to stop)\n")
        try:
            stop.wait()
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="SSE push client")
    parser.add_argument("--url", default="http://localhost:8080/events")
    parser.add_argument("--events", default="", help="Comma-separated event names")
    parser.add_argument("--username")
    parser.add_argument("--password")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    names = [e.strip() for e in args.events.split(",") if e.strip()]
    main(args.url, names, args.username, args.password)
