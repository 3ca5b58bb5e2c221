# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base bucket backend.

A bucket backend stores token bucket state for any number of keys and
performs atomic check-and-consume operations on them. The rate limiter holds
one backend per (provider, dimension) pair; host applications can supply their
own implementation (e.g. backed by shared storage) through the external rate
limiter seam.
"""

import abc

from ..types.rate_limit import ConsumeResult


class BucketBackend(abc.ABC):
    """
    Abstract storage and admission logic for token buckets.

    Implementations must make ``consume`` atomic with respect to other calls
    for the same key. Calls for different keys may run concurrently.
    """

    def __init__(self, namespace: str = "llm_ratelimit"):
        """
        Args:
            namespace: Namespace for isolating keys across limiter instances
        """
        self.namespace = namespace

    @abc.abstractmethod
    def consume(self, key: str, amount: float = 1) -> ConsumeResult:
        """
        Atomically take ``amount`` units from the bucket if they are available.

        Args:
            key: Bucket key (e.g. 'openai_requests')
            amount: Units to take

        Returns:
            ConsumeResult with ``accepted`` and, on denial, ``retry_after``
            seconds until the amount would be available
        """
        pass

    @abc.abstractmethod
    def wait_time(self, key: str, amount: float = 1) -> float:
        """
        Seconds until ``amount`` units are available, without consuming.

        Args:
            key: Bucket key
            amount: Units that would be requested

        Returns:
            Wait time in seconds (0.0 if available now)
        """
        pass

    @abc.abstractmethod
    def reset(self, key: str | None = None) -> None:
        """
        Restore a bucket (or every bucket when ``key`` is None) to full capacity.
        """
        pass

    @property
    def capacity(self) -> float | None:
        """Largest amount one call may request, or None when the backend cannot tell."""
        return None

    def _namespaced(self, key: str) -> str:
        return f"{self.namespace}:{key}"
