#!/usr/bin/env python3
"""Bidirectional clipboard synchronization coordination.

This module re-exports synchronization components from submodules for
convenient imports. The actual implementations are in:
- sync_state: PeerState dataclass
- sync_detector: detect_change, run_change_detector
- sync_handlers: handle_incoming_message
- sync_loop: run_sync_session
"""

from copysync.sync_detector import detect_change, run_change_detector
from copysync.sync_handlers import handle_incoming_message
from copysync.sync_loop import run_sync_session
from copysync.sync_state import PeerState

__all__ = [
    "PeerState",
    "detect_change",
    "handle_incoming_message",
    "run_change_detector",
    "run_sync_session",
]
