#!/usr/bin/env python3
"""Main synchronization session loop.

This module provides run_sync_session, which drives one peer connection:
received messages are applied to the local clipboard, local changes are
detected and queued, and queued messages are written to the connection.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

from copysync.client_constants import POLL_INTERVAL
from copysync.sync_detector import run_change_detector
from copysync.sync_handlers import handle_incoming_message
from copysync.sync_state import PeerState
from copysync.transport import pump_outbound, race

if TYPE_CHECKING:
    from copysync.clipboard import Clipboard
    from copysync.codec import Message
    from copysync.sync_handlers import Notifier

logger = logging.getLogger(__name__)


async def run_sync_session(
    websocket: Any,
    clipboard: Clipboard,
    notifier: Optional[Notifier] = None,
    poll_interval: float = POLL_INTERVAL,
) -> None:
    """Synchronize the local clipboard over one connection until it closes.

    Creates a fresh PeerState and outbound queue, then races the inbound
    pump, the outbound pump and the change detector. When the connection
    closes in either direction the other tasks are cancelled and any image
    header still waiting for its payload is discarded.

    Args:
        websocket: An open WebSocket connection.
        clipboard: The local clipboard primitive.
        notifier: Called with a description of each received image.
        poll_interval: Seconds between clipboard polls.
    """
    state = PeerState()
    outbound: asyncio.Queue[Message] = asyncio.Queue()
    try:
        await race(
            pump_inbound(websocket, state, clipboard, notifier),
            pump_outbound(websocket, outbound),
            run_change_detector(state, clipboard, outbound, poll_interval),
        )
    finally:
        header = state.discard_pending_image()
        if header is not None:
            logger.debug(
                "Session ended before %dx%d image payload arrived",
                header.width,
                header.height,
            )


async def pump_inbound(
    websocket: Any,
    state: PeerState,
    clipboard: Clipboard,
    notifier: Optional[Notifier] = None,
) -> None:
    """Apply every received message until the connection closes.

    Args:
        websocket: The connection to read from.
        state: The session state.
        clipboard: The local clipboard primitive.
        notifier: Called with a description of each received image.
    """
    async for message in websocket:
        await handle_incoming_message(state, clipboard, message, notifier)
