#!/usr/bin/env python3
"""Tests for client mode entry point."""
import asyncio
from unittest.mock import patch

import pytest

from copysync.transport import AddressError


@pytest.mark.asyncio
async def test_run_client_stops_on_shutdown_request() -> None:
    """Test run_client returns once SIGINT/SIGTERM is signalled."""
    from copysync.client import run_client

    shutdown_requested = asyncio.Event()
    seen: list[str] = []

    async def fake_loop(uri, clipboard, notifier) -> None:
        seen.append(uri)
        shutdown_requested.set()
        await asyncio.sleep(3600)

    with patch("copysync.client.shutdown_event", return_value=shutdown_requested), \
        patch("copysync.client.run_client_loop", fake_loop):
        await asyncio.wait_for(run_client("relay.local:5120"), timeout=1.0)

    assert seen == ["ws://relay.local:5120"]


@pytest.mark.asyncio
async def test_run_client_rejects_bad_address() -> None:
    """Test an unsupported address fails before connecting."""
    from copysync.client import run_client

    with patch("copysync.client.run_client_loop") as mock_loop:
        with pytest.raises(AddressError):
            await run_client("ftp://relay.local")

    mock_loop.assert_not_called()


@pytest.mark.asyncio
async def test_run_client_propagates_address_error_from_loop() -> None:
    """Test an unresolvable host ends client mode."""
    from copysync.client import run_client

    async def failing_loop(uri, clipboard, notifier) -> None:
        raise AddressError("Cannot resolve")

    with patch("copysync.client.run_client_loop", failing_loop):
        with pytest.raises(AddressError, match="Cannot resolve"):
            await asyncio.wait_for(run_client("nowhere:5120"), timeout=1.0)
