#!/usr/bin/env python3
"""Native clipboard access.

This module provides the clipboard primitive used by the sync modules:
reading and writing text, and reading and writing RGBA8 images. Any
object with the four methods of the Clipboard protocol can stand in for
the system clipboard; the sync code never touches the platform directly.

SystemClipboard uses pyperclip for text and Pillow's ImageGrab for image
reads. Image writes encode a PNG with Pillow and hand it to wl-copy on
Wayland or xclip on X11.
"""

from __future__ import annotations

import io
import os
import shutil
import subprocess
import sys
from typing import Protocol

import pyperclip
from PIL import Image, ImageGrab

from copysync.content import ImageContent

# Timeout in seconds for external clipboard helpers to accept image data
CLIPBOARD_TIMEOUT: float = 2.0


class ClipboardError(Exception):
    """Base exception for clipboard read and write failures."""

    pass


class ContentUnavailable(ClipboardError):
    """The clipboard does not hold content of the requested kind."""

    pass


class PlatformError(ClipboardError):
    """The platform clipboard could not be accessed."""

    pass


class Clipboard(Protocol):
    """Clipboard primitive consumed by the change detector and inbound path."""

    def read_text(self) -> str: ...

    def read_image(self) -> ImageContent: ...

    def write_text(self, text: str) -> None: ...

    def write_image(self, image: ImageContent) -> None: ...


class SystemClipboard:
    """Clipboard primitive backed by the operating system clipboard."""

    def read_text(self) -> str:
        """Return the clipboard text.

        Raises:
            PlatformError: If no clipboard mechanism is available.
        """
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as e:
            raise PlatformError(f"Cannot read clipboard text: {e}") from e

    def read_image(self) -> ImageContent:
        """Return the clipboard image converted to RGBA8.

        Raises:
            ContentUnavailable: If the clipboard holds no image.
            PlatformError: If the clipboard cannot be queried.
        """
        try:
            grabbed = ImageGrab.grabclipboard()
        except (OSError, NotImplementedError) as e:
            raise PlatformError(f"Cannot read clipboard image: {e}") from e
        # grabclipboard returns a list of file names when files were copied
        if not isinstance(grabbed, Image.Image):
            raise ContentUnavailable("Clipboard holds no image")
        rgba = grabbed.convert("RGBA")
        return ImageContent(rgba.width, rgba.height, rgba.tobytes())

    def write_text(self, text: str) -> None:
        """Replace the clipboard with text.

        Raises:
            PlatformError: If no clipboard mechanism is available.
        """
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise PlatformError(f"Cannot write clipboard text: {e}") from e

    def write_image(self, image: ImageContent) -> None:
        """Replace the clipboard with an image.

        Raises:
            PlatformError: If no image-capable clipboard helper is available,
                the image cannot be encoded, or the helper fails.
        """
        command = _image_copy_command()
        try:
            png = encode_png(image)
        except (OSError, ValueError) as e:
            raise PlatformError(f"Cannot encode {image.width}x{image.height} image: {e}") from e
        try:
            subprocess.run(
                command,
                input=png,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=CLIPBOARD_TIMEOUT,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise PlatformError(f"{command[0]} failed: {e}") from e


def encode_png(image: ImageContent) -> bytes:
    """Encode an RGBA8 image as PNG bytes."""
    buffer = io.BytesIO()
    Image.frombytes("RGBA", (image.width, image.height), image.pixels).save(buffer, "PNG")
    return buffer.getvalue()


def _image_copy_command() -> list[str]:
    """Pick the command that puts a PNG from stdin on the clipboard.

    Raises:
        PlatformError: If the platform has no supported helper.
    """
    if not sys.platform.startswith("linux"):
        raise PlatformError(f"Writing images is not supported on {sys.platform}")
    if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
        return ["wl-copy", "--type", "image/png"]
    if shutil.which("xclip"):
        return ["xclip", "-selection", "clipboard", "-t", "image/png", "-i"]
    raise PlatformError("Writing images needs wl-copy or xclip")
