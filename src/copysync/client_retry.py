#!/usr/bin/env python3
"""Client connection and retry logic for copysync.

This module provides connection handling with automatic retry using
tenacity. A refused or failed connection is retried every RETRY_INTERVAL
seconds, indefinitely. When an established session ends, the client
reconnects straight away with a fresh session state. An unresolvable host
is fatal only on the first connect; later it is retried like any other
failure.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import TYPE_CHECKING, Any, Optional

import websockets
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_never,
    wait_fixed,
)
from websockets.exceptions import InvalidHandshake, InvalidURI

from copysync.client_constants import POLL_INTERVAL, RETRY_INTERVAL
from copysync.config import WEBSOCKET_OPTIONS
from copysync.sync import run_sync_session
from copysync.transport import AddressError, TransportError

if TYPE_CHECKING:
    from copysync.clipboard import Clipboard
    from copysync.sync_handlers import Notifier

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """Turn a user-supplied address into a WebSocket URI.

    Args:
        address: "host:port" or a ws:// or wss:// URI.

    Returns:
        The WebSocket URI.

    Raises:
        AddressError: If the address uses another scheme.
    """
    if "://" not in address:
        return f"ws://{address}"
    scheme = address.split("://", 1)[0].lower()
    if scheme not in ("ws", "wss"):
        raise AddressError(f"Unsupported scheme {scheme!r} in {address}")
    return address


async def connect_to_relay(uri: str) -> Any:
    """Open a WebSocket connection to a relay or listening peer.

    Args:
        uri: WebSocket URI to connect to.

    Returns:
        The open connection.

    Raises:
        AddressError: If the URI is invalid or the host cannot be resolved.
        TransportError: If the connection is refused, times out, or the
            handshake fails.
    """
    try:
        return await websockets.connect(uri, **WEBSOCKET_OPTIONS)
    except InvalidURI as e:
        raise AddressError(f"Invalid address {uri}: {e}") from e
    except socket.gaierror as e:
        raise AddressError(f"Cannot resolve {uri}: {e}") from e
    except (OSError, asyncio.TimeoutError, InvalidHandshake) as e:
        raise TransportError(f"Failed to connect to {uri}: {e}") from e


@retry(
    wait=wait_fixed(RETRY_INTERVAL),
    retry=retry_if_exception_type(TransportError),
    stop=stop_never,
    before_sleep=before_sleep_log(logger, logging.WARNING),
)
async def connect_with_retry(uri: str) -> Any:
    """Connect, retrying every RETRY_INTERVAL seconds on TransportError.

    Args:
        uri: WebSocket URI to connect to.

    Returns:
        The open connection.

    Raises:
        AddressError: Not retried; the address can never work.
    """
    logger.debug("Connecting to %s", uri)
    return await connect_to_relay(uri)


@retry(
    wait=wait_fixed(RETRY_INTERVAL),
    retry=retry_if_exception_type((TransportError, AddressError)),
    stop=stop_never,
    before_sleep=before_sleep_log(logger, logging.WARNING),
)
async def reconnect_with_retry(uri: str) -> Any:
    """Reconnect after a lost session, retrying every RETRY_INTERVAL seconds.

    Unlike connect_with_retry, a name resolution failure is retried too:
    the address has worked before, so the lookup failing means the
    network is down, not that the address is wrong.

    Args:
        uri: WebSocket URI to connect to.

    Returns:
        The open connection.
    """
    logger.debug("Reconnecting to %s", uri)
    return await connect_to_relay(uri)


async def run_client_loop(
    uri: str,
    clipboard: Clipboard,
    notifier: Optional[Notifier] = None,
    poll_interval: float = POLL_INTERVAL,
) -> None:
    """Connect and sync, reconnecting whenever the session ends.

    Each session starts with a fresh PeerState, so the first poll after a
    reconnect may send the current clipboard again.

    Args:
        uri: WebSocket URI of the relay or listening peer.
        clipboard: The local clipboard primitive.
        notifier: Called with a description of each received image.
        poll_interval: Seconds between clipboard polls.

    Note:
        This function never returns normally - it either runs until
        cancelled or raises AddressError from the first connect.
    """
    connect = connect_with_retry
    while True:
        websocket = await connect(uri)
        logger.info("Connected: %s", uri)
        try:
            await run_sync_session(websocket, clipboard, notifier, poll_interval)
        finally:
            await websocket.close()
        logger.warning("Connection to %s lost, reconnecting", uri)
        connect = reconnect_with_retry
