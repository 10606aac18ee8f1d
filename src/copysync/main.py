"""CLI handling for copysync.

This module provides the command-line interface for copysync, handling
argument parsing via click, logging configuration, and dispatching to
relay, listening peer, or client mode based on user-specified options.

Usage:
    copysync --relay [--host HOST] [--port PORT] [--verbose]
    copysync --peer [--host HOST] [--port PORT] [--verbose]
    copysync --connect ADDRESS [--verbose]
"""

import click
import sys

from copysync.config import DEFAULT_HOST, DEFAULT_PORT
from copysync.main_options import MutuallyExclusiveOption
from copysync.main_logging import configure_logging


@click.command()
@click.option(
    "--relay",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    conflicts_with=["peer", "connect"],
    help="Run as relay, forwarding clipboard changes between peers",
)
@click.option(
    "--peer",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    conflicts_with=["relay", "connect"],
    help="Listen for peers connecting directly, syncing the local clipboard",
)
@click.option(
    "--connect",
    metavar="ADDRESS",
    cls=MutuallyExclusiveOption,
    conflicts_with=["relay", "peer"],
    help="Connect to a relay or listening peer (host:port or ws:// URI)",
)
@click.option(
    "--host",
    default=DEFAULT_HOST,
    show_default=True,
    help="Interface to listen on with --relay or --peer",
)
@click.option(
    "--port",
    default=DEFAULT_PORT,
    show_default=True,
    type=click.IntRange(0, 65535),
    help="Port to listen on with --relay or --peer",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(relay: bool, peer: bool, connect: str | None, host: str, port: int, verbose: bool) -> None:
    """Synchronize the clipboard between machines over WebSocket."""
    if not relay and not peer and connect is None:
        raise click.UsageError("One of --relay, --peer or --connect must be specified")

    configure_logging(verbose)

    _run_mode(relay, peer, connect, host, port)


def _run_mode(relay: bool, peer: bool, connect: str | None, host: str, port: int) -> None:
    """Run the selected mode until it is stopped.

    Args:
        relay: True for relay mode.
        peer: True for listening peer mode.
        connect: Address to connect to in client mode, or None.
        host: Interface to listen on in relay and peer modes.
        port: Port to listen on in relay and peer modes.
    """
    import asyncio
    from copysync.transport import AddressError

    try:
        if relay:
            from copysync.relay import run_relay
            asyncio.run(run_relay(host, port))
        elif peer:
            from copysync.peer import run_peer
            asyncio.run(run_peer(host, port))
        else:
            from copysync.client import run_client
            asyncio.run(run_client(connect))
    except (AddressError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
