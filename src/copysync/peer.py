#!/usr/bin/env python3
"""Listening peer mode implementation for copysync.

A listening peer syncs its own clipboard directly with peers that connect
to it, without a relay in between. Each accepted connection runs its own
session with its own state and change detector.

Usage:
    copysync --peer [--host HOST] [--port PORT]
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Optional

from copysync.clipboard import SystemClipboard
from copysync.config import DEFAULT_HOST, DEFAULT_PORT
from copysync.listener import serve_until_stopped
from copysync.notify import notify
from copysync.signals import shutdown_event
from copysync.sync import run_sync_session
from copysync.transport import format_connection_id

if TYPE_CHECKING:
    from copysync.clipboard import Clipboard
    from copysync.sync_handlers import Notifier

logger = logging.getLogger(__name__)


async def handle_peer(
    clipboard: Clipboard, notifier: Optional[Notifier], websocket: Any
) -> None:
    """Run a sync session for one directly connected peer.

    Args:
        clipboard: The local clipboard primitive.
        notifier: Called with a description of each received image.
        websocket: The accepted WebSocket connection.
    """
    connection_id = format_connection_id(websocket.remote_address)
    logger.info("Peer connected: %s", connection_id)
    try:
        await run_sync_session(websocket, clipboard, notifier)
    finally:
        logger.info("Peer disconnected: %s", connection_id)


async def run_peer(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Listen for direct peer connections until SIGINT or SIGTERM.

    Args:
        host: Interface to bind.
        port: Port to listen on.

    Raises:
        OSError: If the listening socket cannot be bound.
    """
    handler = functools.partial(handle_peer, SystemClipboard(), notify)
    await serve_until_stopped(handler, host, port, "peer", shutdown_event())
