#!/usr/bin/env python3
"""Network defaults shared by the relay, the listening peer and the client."""

# Interface the relay and listening peer bind to by default.
DEFAULT_HOST: str = "0.0.0.0"

# Port the relay and listening peer bind to by default.
DEFAULT_PORT: int = 5120

# Keyword arguments for websockets.serve and websockets.connect.
# Clipboard images can be large, so message size and receive queue are unlimited.
WEBSOCKET_OPTIONS: dict = {
    "max_size": None,
    "max_queue": None,
}
