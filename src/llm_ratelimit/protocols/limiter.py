# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for rate limiters."""

from typing import Protocol, runtime_checkable

from ..types.model import Model


@runtime_checkable
class RateLimiterProtocol(Protocol):
    """
    Interface used by the rate limited client to admit requests.
    """

    def consume(self, model: Model, estimated_tokens: int = 1) -> None:
        """
        Take one request and ``estimated_tokens`` tokens from the model's
        provider quota.

        Raises:
            RateLimitExceededError: If either quota dimension is exhausted
        """
        ...

    def is_allowed(self, model: Model, estimated_tokens: int = 1) -> bool:
        """Whether the request is admitted. May consume quota."""
        ...

    def get_retry_after(self, model: Model) -> float | None:
        """Seconds until the provider quota admits a request, or None."""
        ...
