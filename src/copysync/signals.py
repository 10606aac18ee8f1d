"""Signal handling for clean shutdown."""
from __future__ import annotations

import asyncio
import signal
from contextlib import suppress


def shutdown_event() -> asyncio.Event:
    """Return an event that is set on SIGINT or SIGTERM.

    Must be called from within the running event loop. On platforms
    without loop signal handlers the event is only set by the caller.
    """
    shutdown_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(signum, shutdown_requested.set)
    return shutdown_requested
