#!/usr/bin/env python3
"""Inbound message handlers.

This module applies messages received from remote to the local clipboard:
- handle_incoming_message: dispatch a Text or Binary message
- handle_incoming_notification: apply a decoded Text envelope
- handle_incoming_payload: complete a pending image with its pixels

The cache is updated BEFORE the clipboard is written, so the next
detector poll sees the received content as unchanged and does not send
it back. Undecodable messages and payloads without a header are logged
and dropped; they never end the session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from copysync.clipboard import ClipboardError
from copysync.codec import (
    CodecError,
    ImageHeader,
    TextNotification,
    decode,
    deserialize_notification,
)
from copysync.content import ImageContent, TextContent, expected_pixel_length

if TYPE_CHECKING:
    from copysync.clipboard import Clipboard
    from copysync.codec import Message
    from copysync.sync_state import PeerState

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


async def handle_incoming_message(
    state: PeerState,
    clipboard: Clipboard,
    message: Message,
    notifier: Optional[Notifier] = None,
) -> None:
    """Handle one message received from remote.

    Args:
        state: The session state.
        clipboard: The local clipboard primitive.
        message: A Text (str) or Binary (bytes) message.
        notifier: Called with a short description of each applied image.
    """
    async with state.lock:
        if isinstance(message, str):
            handle_incoming_notification(state, clipboard, message)
        else:
            handle_incoming_payload(state, clipboard, message, notifier)


def handle_incoming_notification(
    state: PeerState, clipboard: Clipboard, message: str
) -> None:
    """Apply a Text message: set text, or buffer an image header.

    Args:
        state: The session state.
        clipboard: The local clipboard primitive.
        message: The JSON envelope.
    """
    try:
        notification = deserialize_notification(message)
    except CodecError as e:
        logger.warning("Dropping malformed notification: %s", e)
        return

    orphan = state.discard_pending_image()
    if orphan is not None:
        logger.warning(
            "Discarding %dx%d image header that never received its payload",
            orphan.width,
            orphan.height,
        )

    if isinstance(notification, ImageHeader):
        state.pending_image_header = notification
        logger.debug(
            "Waiting for %dx%d image payload", notification.width, notification.height
        )
    elif isinstance(notification, TextNotification):
        # Record BEFORE writing so the next poll does not echo it
        state.cache = TextContent(notification.content)
        try:
            clipboard.write_text(notification.content)
        except ClipboardError as e:
            logger.error("Failed to set clipboard text: %s", e)
            return
        logger.debug("Received and set %d characters of text", len(notification.content))
    else:
        raise TypeError(f"Unhandled notification: {notification!r}")


def handle_incoming_payload(
    state: PeerState,
    clipboard: Clipboard,
    payload: bytes,
    notifier: Optional[Notifier] = None,
) -> None:
    """Apply a Binary message as the pixels of the pending image header.

    Args:
        state: The session state.
        clipboard: The local clipboard primitive.
        payload: zlib-compressed RGBA8 pixels.
        notifier: Called with "W: <width> H: <height>" once applied.
    """
    header = state.discard_pending_image()
    if header is None:
        logger.warning("Dropping %d-byte image payload with no pending header", len(payload))
        return

    expected = expected_pixel_length(header.width, header.height)
    try:
        pixels = decode(payload, max_size=expected)
    except CodecError as e:
        logger.warning("Dropping %dx%d image: %s", header.width, header.height, e)
        return
    if len(pixels) != expected:
        logger.warning(
            "Dropping %dx%d image: expected %d pixel bytes, got %d",
            header.width,
            header.height,
            expected,
            len(pixels),
        )
        return

    image = ImageContent(header.width, header.height, pixels)
    # Record BEFORE writing so the next poll does not echo it
    state.cache = image
    try:
        clipboard.write_image(image)
    except ClipboardError as e:
        logger.error("Failed to set clipboard image: %s", e)
        return
    logger.debug("Received and set %dx%d image", image.width, image.height)
    if notifier is not None:
        notifier(f"W: {image.width} H: {image.height}")
