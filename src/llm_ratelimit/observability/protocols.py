# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for metrics sinks used by the rate limited client."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ClientMetricsProtocol(Protocol):
    """
    Receives one call per event of the rate limited client's retry loop.

    ``provider`` is the provider id string (e.g. 'openai').
    """

    def record_attempt(self, provider: str) -> None:
        """An attempt entered the limiter."""
        ...

    def record_success(self, provider: str) -> None:
        """The executor returned a result."""
        ...

    def record_quota_denial(self, provider: str) -> None:
        """The limiter or the executor reported an exceeded quota."""
        ...

    def record_retry(self, provider: str, reason: str, delay: float) -> None:
        """A retry was scheduled after ``delay`` seconds. ``reason`` is 'quota' or 'transient'."""
        ...

    def record_failure(self, provider: str, outcome: str) -> None:
        """A call failed for good. ``outcome`` is 'non_retryable', 'quota' or 'exhausted'."""
        ...
