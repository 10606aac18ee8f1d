#!/usr/bin/env python3
"""Local clipboard change detection.

This module polls the local clipboard on a fixed interval and turns each
change into outbound messages:
- detect_change: one poll, returning the messages to send (possibly none)
- run_change_detector: the periodic loop feeding a session's outbound queue

An image is preferred over text: text is only read when the clipboard
holds no image. Content equal to PeerState.cache is never sent, which is
also what keeps content received from remote from being echoed back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from copysync.client_constants import POLL_INTERVAL
from copysync.clipboard import ClipboardError, ContentUnavailable
from copysync.codec import (
    ImageHeader,
    TextNotification,
    encode,
    serialize_notification,
)
from copysync.content import TextContent

if TYPE_CHECKING:
    from copysync.clipboard import Clipboard
    from copysync.codec import Message
    from copysync.sync_state import PeerState

logger = logging.getLogger(__name__)


def detect_change(state: PeerState, clipboard: Clipboard) -> list[Message]:
    """Poll the clipboard once and build messages for a detected change.

    Updates state.cache to the new content when a change is found. A
    failed clipboard read skips the poll and leaves the cache untouched.
    Callers must hold state.lock.

    Args:
        state: The session state whose cache is compared and updated.
        clipboard: The local clipboard primitive.

    Returns:
        [header, compressed pixels] for a new image, [text notification]
        for new text, or [] when nothing changed.
    """
    try:
        image = clipboard.read_image()
    except ContentUnavailable:
        image = None
    except ClipboardError as e:
        logger.debug("Clipboard image read failed, skipping poll: %s", e)
        return []

    if image is not None:
        if state.cache == image:
            return []
        state.cache = image
        logger.debug("Sending %dx%d image", image.width, image.height)
        header = serialize_notification(ImageHeader(image.width, image.height))
        return [header, encode(image.pixels)]

    try:
        text = clipboard.read_text()
    except ClipboardError as e:
        logger.debug("Clipboard text read failed, skipping poll: %s", e)
        return []

    current = TextContent(text)
    if state.cache == current:
        return []
    state.cache = current
    logger.debug("Sending %d characters of text", len(text))
    return [serialize_notification(TextNotification(text))]


async def run_change_detector(
    state: PeerState,
    clipboard: Clipboard,
    outbound: asyncio.Queue[Message],
    interval: float = POLL_INTERVAL,
) -> None:
    """Poll the clipboard every interval seconds until cancelled.

    Messages from one poll are enqueued together while state.lock is held,
    so an image header is always directly followed by its payload.

    Args:
        state: The session state.
        clipboard: The local clipboard primitive.
        outbound: The session's outbound message queue.
        interval: Seconds to wait before each poll.
    """
    while True:
        await asyncio.sleep(interval)
        async with state.lock:
            for message in detect_change(state, clipboard):
                outbound.put_nowait(message)
