#!/usr/bin/env python3
"""Client mode implementation for copysync.

This module provides the main entry point for client mode which connects
to a copysync relay, or directly to a listening peer. The client polls
the local clipboard and sends changes over the connection, while also
applying clipboard updates received from it.

See client_retry.py for connection handling.
"""

from __future__ import annotations

from copysync.client_retry import normalize_address, run_client_loop
from copysync.clipboard import SystemClipboard
from copysync.notify import notify
from copysync.signals import shutdown_event
from copysync.transport import race


async def run_client(address: str) -> None:
    """Run client mode connecting to a relay or listening peer.

    Runs until SIGINT or SIGTERM.

    Args:
        address: "host:port" or a ws:// or wss:// URI.

    Raises:
        AddressError: If the address is invalid or cannot be resolved.
    """
    uri = normalize_address(address)
    shutdown_requested = shutdown_event()
    await race(
        run_client_loop(uri, SystemClipboard(), notify),
        shutdown_requested.wait(),
    )
