#!/usr/bin/env python3
"""
Clipboard content variants.

The clipboard holds exactly one of two kinds of content at a time: text,
or an RGBA8 image stored row-major. Both are frozen dataclasses so that
equality is structural; two images are equal only if their dimensions and
every pixel byte match.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# RGBA8: one byte each for red, green, blue and alpha.
BYTES_PER_PIXEL: int = 4


def expected_pixel_length(width: int, height: int) -> int:
    """Return the size in bytes of a width x height RGBA8 pixel buffer."""
    return width * height * BYTES_PER_PIXEL


@dataclass(frozen=True)
class TextContent:
    """Plain text clipboard content."""

    text: str


@dataclass(frozen=True)
class ImageContent:
    """
    Image clipboard content.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: Raw RGBA8 pixel buffer, row-major, width*height*4 bytes.
    """

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        expected = expected_pixel_length(self.width, self.height)
        if len(self.pixels) != expected:
            raise ValueError(
                f"Image {self.width}x{self.height} needs {expected} bytes, "
                f"got {len(self.pixels)}"
            )

    def __repr__(self) -> str:
        return f"ImageContent(width={self.width}, height={self.height}, pixels=<{len(self.pixels)} bytes>)"


ClipboardContent = Union[TextContent, ImageContent]
