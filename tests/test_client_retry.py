#!/usr/bin/env python3
"""Tests for client connection and retry logic."""
import asyncio
import socket
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from websockets.exceptions import InvalidURI

from conftest_fakes import FakeClipboard, FakeWebSocket
from copysync.client_constants import RETRY_INTERVAL
from copysync.transport import AddressError, TransportError


class StopClient(Exception):
    """Raised by a patched connect to end the client loop."""


def test_normalize_address_adds_scheme() -> None:
    """Test a bare host:port becomes a ws:// URI."""
    from copysync.client_retry import normalize_address

    assert normalize_address("192.168.1.5:5120") == "ws://192.168.1.5:5120"


def test_normalize_address_keeps_websocket_uris() -> None:
    """Test ws:// and wss:// URIs pass through unchanged."""
    from copysync.client_retry import normalize_address

    assert normalize_address("ws://host:5120") == "ws://host:5120"
    assert normalize_address("wss://host/sync") == "wss://host/sync"


def test_normalize_address_rejects_other_schemes() -> None:
    """Test non-WebSocket schemes raise AddressError."""
    from copysync.client_retry import normalize_address

    with pytest.raises(AddressError, match="Unsupported scheme"):
        normalize_address("http://host:5120")


@pytest.mark.asyncio
async def test_connect_to_relay_success() -> None:
    """Test connect_to_relay returns the open connection."""
    from copysync.client_retry import connect_to_relay

    connection = MagicMock()
    with patch("copysync.client_retry.websockets.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.return_value = connection
        result = await connect_to_relay("ws://host:5120")

    assert result is connection
    mock_connect.assert_called_once_with("ws://host:5120", max_size=None, max_queue=None)


@pytest.mark.asyncio
async def test_connect_to_relay_refused_raises_transport_error() -> None:
    """Test a refused connection becomes TransportError."""
    from copysync.client_retry import connect_to_relay

    with patch("copysync.client_retry.websockets.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = ConnectionRefusedError("Connection refused")
        with pytest.raises(TransportError, match="Connection refused"):
            await connect_to_relay("ws://host:5120")


@pytest.mark.asyncio
async def test_connect_to_relay_timeout_raises_transport_error() -> None:
    """Test a handshake timeout becomes TransportError."""
    from copysync.client_retry import connect_to_relay

    with patch("copysync.client_retry.websockets.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = asyncio.TimeoutError()
        with pytest.raises(TransportError):
            await connect_to_relay("ws://host:5120")


@pytest.mark.asyncio
async def test_connect_to_relay_invalid_uri_raises_address_error() -> None:
    """Test an invalid URI becomes AddressError."""
    from copysync.client_retry import connect_to_relay

    with patch("copysync.client_retry.websockets.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = InvalidURI("ws://", "no host")
        with pytest.raises(AddressError):
            await connect_to_relay("ws://")


@pytest.mark.asyncio
async def test_connect_to_relay_unknown_host_raises_address_error() -> None:
    """Test a DNS failure becomes AddressError, not TransportError."""
    from copysync.client_retry import connect_to_relay

    with patch("copysync.client_retry.websockets.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = socket.gaierror(-2, "Name or service not known")
        with pytest.raises(AddressError, match="Cannot resolve"):
            await connect_to_relay("ws://no-such-host:5120")


def test_retry_policy_is_fixed_interval() -> None:
    """Test reconnect attempts wait a fixed 60 seconds."""
    from copysync.client_retry import connect_with_retry

    assert RETRY_INTERVAL == 60.0
    assert connect_with_retry.retry.wait.wait_fixed == RETRY_INTERVAL


@pytest.mark.asyncio
async def test_connect_succeeds_after_three_failures() -> None:
    """Test three refusals 60 s apart, then success on the fourth attempt."""
    from copysync.client_retry import connect_with_retry

    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    connection = MagicMock()
    failure = TransportError("Connection refused")
    with patch("copysync.client_retry.connect_to_relay", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = [failure, failure, failure, connection]
        result = await connect_with_retry.retry_with(sleep=fake_sleep)("ws://host:5120")

    assert result is connection
    assert mock_connect.await_count == 4
    assert delays == [60.0, 60.0, 60.0]


@pytest.mark.asyncio
async def test_connect_does_not_retry_address_errors() -> None:
    """Test an address that can never work is raised at once."""
    from copysync.client_retry import connect_with_retry

    sleeper = AsyncMock()
    with patch("copysync.client_retry.connect_to_relay", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = AddressError("bad")
        with pytest.raises(AddressError):
            await connect_with_retry.retry_with(sleep=sleeper)("ws://")

    assert mock_connect.await_count == 1
    sleeper.assert_not_called()


@pytest.mark.asyncio
async def test_run_client_loop_reconnects_with_fresh_state() -> None:
    """Test the client reconnects after a session ends and re-sends content."""
    from copysync.client_retry import run_client_loop

    clipboard = FakeClipboard(text="copied")
    first, second = FakeWebSocket(hold_open=True), FakeWebSocket(hold_open=True)

    async def end_after_first_send(websocket: FakeWebSocket) -> None:
        while not websocket.sent:
            await asyncio.sleep(0)
        websocket.close_inbound()

    with patch("copysync.client_retry.connect_with_retry", new_callable=AsyncMock) as mock_connect, \
        patch("copysync.client_retry.reconnect_with_retry", new_callable=AsyncMock) as mock_reconnect:
        mock_connect.return_value = first
        mock_reconnect.side_effect = [second, StopClient()]
        watchers = [
            asyncio.create_task(end_after_first_send(ws)) for ws in (first, second)
        ]
        with pytest.raises(StopClient):
            await asyncio.wait_for(
                run_client_loop("ws://host:5120", clipboard, poll_interval=0), timeout=1.0
            )
        await asyncio.gather(*watchers)

    # The cache does not survive the reconnect, so both sessions send it
    assert first.sent == ['{"payload":{"Text":{"content":"copied"}}}']
    assert second.sent == first.sent
    assert first.closed and second.closed
    mock_connect.assert_called_once_with("ws://host:5120")
    mock_reconnect.assert_called_with("ws://host:5120")


@pytest.mark.asyncio
async def test_run_client_loop_retries_resolution_failure_after_session() -> None:
    """Test a lookup failure on reconnect is retried instead of exiting."""
    from copysync.client_retry import reconnect_with_retry, run_client_loop

    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    lost = FakeWebSocket()
    lookup_failure = AddressError("Cannot resolve ws://host:5120: Temporary failure in name resolution")
    with patch("copysync.client_retry.connect_to_relay", new_callable=AsyncMock) as mock_connect, \
        patch(
            "copysync.client_retry.reconnect_with_retry",
            reconnect_with_retry.retry_with(sleep=fake_sleep),
        ):
        mock_connect.side_effect = [
            lost,
            lookup_failure,
            lookup_failure,
            TransportError("Connection refused"),
            StopClient(),
        ]
        with pytest.raises(StopClient):
            await asyncio.wait_for(
                run_client_loop("ws://host:5120", FakeClipboard(), poll_interval=3600),
                timeout=1.0,
            )

    assert mock_connect.await_count == 5
    assert delays == [60.0, 60.0, 60.0]
    assert lost.closed


@pytest.mark.asyncio
async def test_run_client_loop_first_resolution_failure_is_fatal() -> None:
    """Test an address that never resolved ends the client at startup."""
    from copysync.client_retry import run_client_loop

    with patch("copysync.client_retry.connect_to_relay", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = AddressError("Cannot resolve ws://nowhere:5120")
        with pytest.raises(AddressError):
            await asyncio.wait_for(
                run_client_loop("ws://nowhere:5120", FakeClipboard()), timeout=1.0
            )

    assert mock_connect.await_count == 1


@pytest.mark.asyncio
async def test_run_client_loop_closes_connection_on_error() -> None:
    """Test the connection is closed when the session raises."""
    from copysync.client_retry import run_client_loop

    websocket = FakeWebSocket(hold_open=True)
    with patch("copysync.client_retry.connect_with_retry", new_callable=AsyncMock) as mock_connect, \
        patch("copysync.client_retry.run_sync_session", new_callable=AsyncMock) as mock_session:
        mock_connect.return_value = websocket
        mock_session.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await run_client_loop("ws://host:5120", FakeClipboard())

    assert websocket.closed
