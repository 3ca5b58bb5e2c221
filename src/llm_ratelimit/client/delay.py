# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Delay implementations.

The rate limited client never calls ``time.sleep`` directly; it goes through
a delay object so that retry timing can be observed and skipped in tests.
"""

import threading
import time


class SystemDelay:
    """Blocks the calling thread with ``time.sleep``."""

    def delay(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class RecordingDelay:
    """
    Records requested delays instead of sleeping.

    Example:
        >>> delay = RecordingDelay()
        >>> delay.delay(2)
        >>> delay.delays
        [2.0]
    """

    def __init__(self) -> None:
        self.delays: list[float] = []
        self._lock = threading.Lock()

    def delay(self, seconds: float) -> None:
        with self._lock:
            self.delays.append(float(seconds))

    @property
    def count(self) -> int:
        return len(self.delays)

    @property
    def total(self) -> float:
        return sum(self.delays)

    def clear(self) -> None:
        with self._lock:
            self.delays.clear()


__all__ = ["RecordingDelay", "SystemDelay"]
