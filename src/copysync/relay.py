#!/usr/bin/env python3
"""Relay mode implementation for copysync.

The relay listens on one WebSocket port and accepts any number of peers.
Every message a peer sends is forwarded to all other connected peers; the
relay never reads or writes a clipboard itself. A peer that disconnects
or fails is removed from the fan-out without affecting the others.

Usage:
    copysync --relay [--host HOST] [--port PORT]
"""

from __future__ import annotations

import functools

from copysync.config import DEFAULT_HOST, DEFAULT_PORT
from copysync.listener import serve_until_stopped
from copysync.relay_handler import handle_connection
from copysync.relay_registry import RelayRegistry
from copysync.signals import shutdown_event


async def run_relay(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Run the relay until SIGINT or SIGTERM.

    Args:
        host: Interface to bind.
        port: Port to listen on.

    Raises:
        OSError: If the listening socket cannot be bound.
    """
    registry = RelayRegistry()
    await serve_until_stopped(
        functools.partial(handle_connection, registry),
        host,
        port,
        "relay",
        shutdown_event(),
    )
