#!/usr/bin/env python3
"""Per-session clipboard synchronization state.

This module provides the PeerState dataclass holding everything one
session needs to remember between messages: the last clipboard content
it applied or sent, and an image header still waiting for its pixels.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from copysync.codec import ImageHeader
from copysync.content import ClipboardContent, TextContent


@dataclass
class PeerState:
    """State for one synchronization session.

    Owned by a single session and discarded when it ends. The change
    detector and the inbound path both mutate it, so both hold lock while
    doing so.

    Attributes:
        cache: Last clipboard content applied from remote or sent to remote.
            Used to suppress duplicate sends and echoes.
        pending_image_header: Header received whose Binary payload has not
            arrived yet, or None.
        lock: Serializes detector ticks against inbound message handling.
    """

    cache: ClipboardContent = field(default_factory=lambda: TextContent(""))
    pending_image_header: ImageHeader | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def discard_pending_image(self) -> ImageHeader | None:
        """Clear and return the buffered image header, if any."""
        header = self.pending_image_header
        self.pending_image_header = None
        return header
