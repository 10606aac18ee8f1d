#!/usr/bin/env python3
"""WebSocket listener shared by the relay and the listening peer.

This module binds the listening socket, prints a startup message, and
serves connections until shutdown is requested.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Awaitable, Callable

import websockets

from copysync.config import WEBSOCKET_OPTIONS

logger = logging.getLogger(__name__)


async def serve_until_stopped(
    handler: Callable[[Any], Awaitable[None]],
    host: str,
    port: int,
    label: str,
    shutdown_requested: asyncio.Event,
) -> None:
    """Accept WebSocket connections until shutdown_requested is set.

    Args:
        handler: Coroutine function called with each accepted connection.
        host: Interface to bind.
        port: Port to bind; 0 picks a free port.
        label: Process role shown in the startup message.
        shutdown_requested: Event that stops the listener when set.

    Raises:
        OSError: If the listening socket cannot be bound.
    """
    async with websockets.serve(handler, host, port, **WEBSOCKET_OPTIONS) as server:
        print_startup_message(label, server)
        await shutdown_requested.wait()
        logger.debug("Shutdown requested, closing %s", label)


def print_startup_message(label: str, server: Any) -> None:
    """Print the bound address of each listening socket to stderr.

    Args:
        label: Process role, e.g. "relay" or "peer".
        server: The running websockets server.
    """
    for sock in server.sockets:
        host, port = sock.getsockname()[:2]
        print(f"copysync {label} listening on ws://{host}:{port}", file=sys.stderr)
