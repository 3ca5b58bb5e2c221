# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for blocking delays."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DelayProtocol(Protocol):
    """Blocks the calling thread. Swapped out in tests to keep retries instant."""

    def delay(self, seconds: float) -> None:
        """Delay execution for ``seconds`` seconds."""
        ...
