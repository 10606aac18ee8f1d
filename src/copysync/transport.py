#!/usr/bin/env python3
"""WebSocket session plumbing shared by the relay and peers.

A connection is driven by concurrent tasks (an inbound pump, an outbound
pump, and on peers a change detector). race() runs them until the first
one finishes, which happens when the connection closes, and then cancels
the rest so nothing keeps writing to a dead connection.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import TYPE_CHECKING, Any, Awaitable

from websockets.exceptions import ConnectionClosed

if TYPE_CHECKING:
    from copysync.codec import Message

logger = logging.getLogger(__name__)

# Numbers connections whose peer address is not available
_unknown_ids = itertools.count(1)


class TransportError(ConnectionError):
    """Connection refused, reset, or rejected during the handshake."""

    pass


class AddressError(ValueError):
    """Address that cannot be connected to (invalid URI, unresolvable host)."""

    pass


def format_connection_id(remote_address: Any) -> str:
    """Format a socket address as "host:port".

    Args:
        remote_address: Address tuple from the connection, or None.

    Returns:
        "host:port", or a unique "unknown-N" when the address is not
        available.
    """
    if not remote_address:
        return f"unknown-{next(_unknown_ids)}"
    host, port = remote_address[0], remote_address[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


async def pump_outbound(websocket: Any, queue: asyncio.Queue[Message]) -> None:
    """Send queued messages over the connection in FIFO order.

    Runs until cancelled or until a send fails.

    Args:
        websocket: The connection to write to.
        queue: Outbound messages; str is sent as Text, bytes as Binary.

    Raises:
        ConnectionClosed: When the connection is closed during a send.
    """
    while True:
        message = await queue.get()
        await websocket.send(message)


async def race(*aws: Awaitable[Any]) -> None:
    """Run awaitables until the first finishes, then cancel the others.

    A ConnectionClosed raised by the first finisher is a normal end of the
    connection and is only logged. Any other exception is re-raised after
    the remaining tasks are cancelled.

    Args:
        *aws: Coroutines to run concurrently.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for task in done:
        if task.cancelled():
            continue
        exc = task.exception()
        if isinstance(exc, ConnectionClosed):
            logger.debug("Connection closed: %s", exc)
        elif exc is not None:
            raise exc
