#!/usr/bin/env python3
"""Relay connection handler.

This module provides the handler for peer connections to the relay. Each
connection is registered on accept, forwards everything it receives to
the other peers, writes everything queued for it, and is unregistered
when either direction ends.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from copysync.transport import format_connection_id, pump_outbound, race

if TYPE_CHECKING:
    from copysync.relay_registry import RelayRegistry

logger = logging.getLogger(__name__)


async def handle_connection(registry: RelayRegistry, websocket: Any) -> None:
    """Handle a single peer connection to the relay.

    Args:
        registry: The relay's shared connection registry.
        websocket: The accepted WebSocket connection.
    """
    connection_id = format_connection_id(websocket.remote_address)
    outbound = registry.register(connection_id)
    logger.info("Peer connected: %s (%d connected)", connection_id, len(registry))
    try:
        await race(
            relay_inbound(registry, connection_id, websocket),
            pump_outbound(websocket, outbound),
        )
    finally:
        registry.unregister(connection_id)
        logger.info("Peer disconnected: %s (%d connected)", connection_id, len(registry))


async def relay_inbound(registry: RelayRegistry, connection_id: str, websocket: Any) -> None:
    """Forward each received message to every other peer.

    Each message is enqueued for all recipients before the next one is
    read, so every recipient sees the sender's messages in order. Close
    frames end the iteration and are never forwarded.

    Args:
        registry: The relay's shared connection registry.
        connection_id: Id of this connection in the registry.
        websocket: The connection to read from.
    """
    async for message in websocket:
        registry.broadcast_except(connection_id, message)
