# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Rate limit types.

This module defines the quota dimensions and the tagged result returned by
rate limit checks.
"""

from dataclasses import dataclass
from enum import Enum

from typing_extensions import Self


class RateLimitDimension(Enum):
    """
    Independently enforced quota axes.

    * **REQUESTS**: Number of requests per interval
    * **TOKENS**: Estimated token volume per interval
    """

    REQUESTS = "requests"
    TOKENS = "tokens"


@dataclass(frozen=True)
class BucketPolicy:
    """
    Token bucket parameters for one quota dimension.

    The bucket starts full, holds at most ``capacity`` units and refills
    continuously at ``refill_amount`` units per ``refill_interval`` seconds.

    Attributes:
        capacity: Maximum units the bucket holds (burst size)
        refill_amount: Units added per refill interval
        refill_interval: Length of the refill interval in seconds
    """

    capacity: int
    refill_amount: int
    refill_interval: float = 60.0

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        if self.refill_amount < 1:
            raise ValueError("refill_amount must be at least 1")
        if self.refill_interval <= 0:
            raise ValueError("refill_interval must be positive")

    @classmethod
    def per_minute(cls, amount: int) -> Self:
        """A bucket of ``amount`` units that fully refills every minute."""
        return cls(capacity=amount, refill_amount=amount, refill_interval=60.0)

    @property
    def refill_rate(self) -> float:
        """Units added per second."""
        return self.refill_amount / self.refill_interval


@dataclass(frozen=True)
class ConsumeResult:
    """
    Outcome of consuming from a single bucket.

    Attributes:
        accepted: Whether the amount was taken from the bucket
        retry_after: Seconds until the amount would be available (0.0 when accepted)
        remaining: Amount left in the bucket after the operation, if known
    """

    accepted: bool
    retry_after: float = 0.0
    remaining: float | None = None


@dataclass(frozen=True)
class LimitCheckResult:
    """
    Result of checking both quota dimensions for a request.

    Attributes:
        accepted: Whether the request was admitted
        retry_after: Suggested wait in seconds if the request was denied
        dimension: Which dimension denied the request (None when admitted)
        remaining_requests: Requests left in the current window, if known
        remaining_tokens: Tokens left in the current window, if known
    """

    accepted: bool
    retry_after: float = 0.0
    dimension: RateLimitDimension | None = None
    remaining_requests: float | None = None
    remaining_tokens: float | None = None

    @property
    def denied(self) -> bool:
        return not self.accepted


__all__ = [
    "BucketPolicy",
    "ConsumeResult",
    "LimitCheckResult",
    "RateLimitDimension",
]
