#!/usr/bin/env python3
"""
Connection registry for broadcast fan-out.

The relay keeps one unbounded outbound queue per connected peer. Each
message a peer sends is enqueued on every other peer's queue; each
connection's own outbound pump drains its queue to the network. Because
enqueueing never blocks, a slow or broken peer cannot hold up delivery to
the others.

Registration, removal and broadcast iteration share one lock, so a
broadcast never sees a half-registered or half-removed connection.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from copysync.codec import Message

logger = logging.getLogger(__name__)


class RelayRegistry:
    """
    Map from connection id to that connection's outbound queue.

    The map itself is private; callers only get the queue for the
    connection they registered.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queues: dict[str, asyncio.Queue[Message]] = {}

    def register(self, connection_id: str) -> asyncio.Queue[Message]:
        """
        Add a connection and return its outbound queue.

        Args:
            connection_id: Unique id of the connection, e.g. "host:port".

        Returns:
            The unbounded queue the connection's outbound pump drains.

        Raises:
            ValueError: If connection_id is already registered.
        """
        queue: asyncio.Queue[Message] = asyncio.Queue()
        with self._lock:
            if connection_id in self._queues:
                raise ValueError(f"Connection {connection_id} is already registered")
            self._queues[connection_id] = queue
        return queue

    def unregister(self, connection_id: str) -> bool:
        """
        Remove a connection. Safe to call more than once.

        Args:
            connection_id: Id passed to register().

        Returns:
            True if this call removed the connection, False if it was
            already gone.
        """
        with self._lock:
            return self._queues.pop(connection_id, None) is not None

    def broadcast_except(self, sender_id: str, message: Message) -> int:
        """
        Enqueue a message for every connection other than the sender.

        Args:
            sender_id: Id of the connection the message came from.
            message: Text (str) or Binary (bytes) message to forward.

        Returns:
            Number of connections the message was queued for.
        """
        with self._lock:
            recipients = [
                queue
                for connection_id, queue in self._queues.items()
                if connection_id != sender_id
            ]
            for queue in recipients:
                queue.put_nowait(message)
        logger.debug("Forwarded message from %s to %d peers", sender_id, len(recipients))
        return len(recipients)

    def connection_ids(self) -> list[str]:
        """Return a snapshot of the registered connection ids."""
        with self._lock:
            return list(self._queues)

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._queues

    def __len__(self) -> int:
        with self._lock:
            return len(self._queues)
