"""Desktop notifications for received clipboard content."""
from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

NOTIFICATION_SUMMARY: str = "Received image from copy-sync"


def notify(message: str) -> None:
    """Show a desktop notification without waiting for it.

    Uses notify-send when it is installed; otherwise the message is only
    logged.

    Args:
        message: Notification body.
    """
    command = shutil.which("notify-send")
    if command is None:
        logger.debug("notify-send not found, skipping notification: %s", message)
        return
    try:
        subprocess.Popen(
            [command, NOTIFICATION_SUMMARY, message],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug("Failed to start notify-send: %s", e)
