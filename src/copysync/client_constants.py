#!/usr/bin/env python3
"""Constants for peer polling and client reconnection.

These constants control how often the local clipboard is polled and how
long the client waits between connection attempts.
"""

# Seconds between clipboard polls by the change detector.
POLL_INTERVAL: float = 2.0

# Fixed delay between connection attempts in seconds.
# Retries continue indefinitely, with no backoff and no jitter.
RETRY_INTERVAL: float = 60.0
