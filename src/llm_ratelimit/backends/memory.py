# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
In-memory token bucket backend.

Suitable for single-process applications. State lives in a dict and is
created lazily the first time a key is used.
"""

import logging
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass

from ..types.rate_limit import BucketPolicy, ConsumeResult
from .base import BucketBackend

logger = logging.getLogger(__name__)

LockFactory = Callable[[], AbstractContextManager[object]]
Clock = Callable[[], float]


@dataclass
class _BucketState:
    available: float
    updated_at: float


class InMemoryTokenBucket(BucketBackend):
    """
    Token bucket with continuous refill, held in process memory.

    Every key gets its own bucket with the same policy and its own lock, so
    callers hitting different keys never contend. The check-then-consume on a
    key happens while holding that key's lock.

    Note:
        This backend is NOT shared across processes. Use the external rate
        limiter seam to plug in shared storage for multi-process deployments.

    Example:
        >>> bucket = InMemoryTokenBucket(BucketPolicy.per_minute(2))
        >>> bucket.consume("openai_requests").accepted
        True
    """

    def __init__(
        self,
        policy: BucketPolicy,
        namespace: str = "llm_ratelimit_memory",
        lock_factory: LockFactory | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """
        Args:
            policy: Capacity and refill rate applied to every key
            namespace: Namespace for key isolation
            lock_factory: Callable returning a new lock per bucket.
                Defaults to threading.Lock.
            clock: Monotonic time source in seconds
        """
        super().__init__(namespace)
        self.policy = policy
        self._lock_factory: LockFactory = lock_factory or threading.Lock
        self._clock = clock

        self._states: dict[str, _BucketState] = {}
        self._locks: dict[str, AbstractContextManager[object]] = {}
        # Guards creation of per-key locks only
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> AbstractContextManager[object]:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._lock_factory()
                self._locks[key] = lock
            return lock

    def _refill_locked(self, key: str, create: bool) -> _BucketState | None:
        """Fetch (optionally creating) and refill the bucket. Caller holds the key lock."""
        now = self._clock()
        state = self._states.get(key)
        if state is None:
            if not create:
                return None
            state = _BucketState(available=float(self.policy.capacity), updated_at=now)
            self._states[key] = state
            logger.debug(
                f"Created bucket '{self._namespaced(key)}' with capacity "
                f"{self.policy.capacity}"
            )
            return state

        elapsed = now - state.updated_at
        if elapsed > 0:
            state.available = min(
                float(self.policy.capacity),
                state.available + elapsed * self.policy.refill_rate,
            )
            state.updated_at = now
        return state

    @property
    def capacity(self) -> float:
        return float(self.policy.capacity)

    def _check_amount(self, key: str, amount: float) -> None:
        if amount > self.policy.capacity:
            raise ValueError(
                f"Cannot consume {amount} units from bucket '{key}' "
                f"with capacity {self.policy.capacity}"
            )

    def consume(self, key: str, amount: float = 1) -> ConsumeResult:
        self._check_amount(key, amount)
        with self._lock_for(key):
            state = self._refill_locked(key, create=True)
            assert state is not None
            if amount <= 0 or state.available >= amount:
                state.available -= max(0.0, amount)
                return ConsumeResult(accepted=True, remaining=state.available)

            deficit = amount - state.available
            return ConsumeResult(
                accepted=False,
                retry_after=deficit / self.policy.refill_rate,
                remaining=state.available,
            )

    def wait_time(self, key: str, amount: float = 1) -> float:
        self._check_amount(key, amount)
        with self._lock_for(key):
            state = self._refill_locked(key, create=False)
            if state is None or state.available >= amount:
                return 0.0
            return (amount - state.available) / self.policy.refill_rate

    def remaining(self, key: str) -> float:
        """Units currently available for ``key`` (full capacity if never used)."""
        with self._lock_for(key):
            state = self._refill_locked(key, create=False)
            return float(self.policy.capacity) if state is None else state.available

    def reset(self, key: str | None = None) -> None:
        with self._registry_lock:
            keys = list(self._states) if key is None else [key]
        for k in keys:
            with self._lock_for(k):
                self._states.pop(k, None)
        logger.debug(
            f"Reset {'all buckets' if key is None else repr(key)} "
            f"in namespace '{self.namespace}'"
        )


__all__ = ["Clock", "InMemoryTokenBucket", "LockFactory"]
