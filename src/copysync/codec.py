#!/usr/bin/env python3
"""
Wire codec for clipboard change notifications.

Every Text message on the wire is a JSON envelope describing one change:

    {"payload":{"Text":{"content":"hello"}}}
    {"payload":{"Image":{"width":2,"height":2}}}

An Image header is always followed, on the same connection, by one Binary
message holding the zlib-compressed RGBA8 pixel buffer. This module
provides the envelope serialization and the pixel compression; sequencing
of header and payload is handled by the sync modules.
"""
from __future__ import annotations

import json
import sys
import zlib
from dataclasses import dataclass
from typing import Union

from copysync.content import expected_pixel_length

# Message kinds carried by the transport: str is a Text frame, bytes a Binary frame.
Message = Union[str, bytes]

TEXT_TAG: str = "Text"
IMAGE_TAG: str = "Image"


class CodecError(Exception):
    """
    Exception raised for undecodable messages.

    Raised when a notification envelope is malformed or carries an unknown
    tag, or when a compressed payload is truncated, corrupt, or larger
    than allowed.
    """

    pass


@dataclass(frozen=True)
class TextNotification:
    """Notification carrying new clipboard text."""

    content: str


@dataclass(frozen=True)
class ImageHeader:
    """Notification announcing an image whose pixels follow as Binary."""

    width: int
    height: int


ChangeNotification = Union[TextNotification, ImageHeader]


def encode(data: bytes) -> bytes:
    """
    Compress a pixel buffer with zlib at the default level.

    Args:
        data: Raw bytes to compress.

    Returns:
        zlib stream bytes.
    """
    return zlib.compress(data)


def decode(data: bytes, max_size: int | None = None) -> bytes:
    """
    Inflate a zlib stream produced by encode().

    Args:
        data: Compressed bytes.
        max_size: Largest acceptable inflated size, or None for no limit.

    Returns:
        The inflated bytes.

    Raises:
        CodecError: If the stream is malformed, truncated, followed by
            trailing data, or inflates past max_size.
    """
    decompressor = zlib.decompressobj()
    try:
        if max_size is None:
            result = decompressor.decompress(data)
        else:
            result = decompressor.decompress(data, max_size + 1)
            if len(result) > max_size:
                raise CodecError(f"Payload inflates past {max_size} bytes")
        result += decompressor.flush()
    except (zlib.error, OverflowError) as e:
        raise CodecError(f"Corrupt compressed payload: {e}") from e
    if not decompressor.eof:
        raise CodecError("Truncated compressed payload")
    if decompressor.unused_data:
        raise CodecError(
            f"{len(decompressor.unused_data)} bytes of trailing data after payload"
        )
    return result


def serialize_notification(notification: ChangeNotification) -> str:
    """
    Serialize a notification to its compact JSON envelope.

    Args:
        notification: The TextNotification or ImageHeader to send.

    Returns:
        The envelope as a JSON string.
    """
    if isinstance(notification, TextNotification):
        payload = {TEXT_TAG: {"content": notification.content}}
    elif isinstance(notification, ImageHeader):
        payload = {
            IMAGE_TAG: {"width": notification.width, "height": notification.height}
        }
    else:
        raise TypeError(f"Not a change notification: {notification!r}")
    return json.dumps({"payload": payload}, separators=(",", ":"), ensure_ascii=False)


def deserialize_notification(text: str) -> ChangeNotification:
    """
    Parse a JSON envelope into a notification.

    Unknown fields next to the known ones are ignored.

    Args:
        text: Contents of a Text message.

    Returns:
        The decoded TextNotification or ImageHeader.

    Raises:
        CodecError: On invalid JSON, a missing payload, anything other than
            exactly one recognized tag, or badly typed fields.
    """
    try:
        envelope = json.loads(text)
    except json.JSONDecodeError as e:
        raise CodecError(f"Invalid JSON: {e}") from e

    if not isinstance(envelope, dict) or not isinstance(envelope.get("payload"), dict):
        raise CodecError("Envelope has no payload object")
    payload = envelope["payload"]
    if len(payload) != 1:
        raise CodecError(f"Payload must carry exactly one tag, got {sorted(payload)}")

    tag, body = next(iter(payload.items()))
    if not isinstance(body, dict):
        raise CodecError(f"{tag} payload is not an object")
    if tag == TEXT_TAG:
        content = body.get("content")
        if not isinstance(content, str):
            raise CodecError("Text payload needs a string 'content'")
        return TextNotification(content)
    if tag == IMAGE_TAG:
        width, height = _dimension(body, "width"), _dimension(body, "height")
        # decode() asks zlib for max_size + 1 bytes, which must fit a ssize_t
        if expected_pixel_length(width, height) >= sys.maxsize:
            raise CodecError(f"Image {width}x{height} is too large")
        return ImageHeader(width, height)
    raise CodecError(f"Unrecognized payload tag: {tag!r}")


def _dimension(body: dict, name: str) -> int:
    value = body.get(name)
    # bool is an int subclass; JSON true/false is never a dimension
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise CodecError(f"Image payload needs a non-negative integer {name!r}")
    return value
