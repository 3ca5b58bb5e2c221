# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metrics for the rate limited client.

This module provides:
1. ClientMetrics - In-process counters, cheap enough to leave always on
2. PrometheusClientMetrics - Prometheus counters and a retry delay histogram

Usage:
    metrics = ClientMetrics()
    client = RateLimitedClient(inner, limiter, registry, metrics=metrics)
    ...
    stats = metrics.get_stats()
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram

logger = logging.getLogger(__name__)

RETRY_DELAY_BUCKETS = (0.5, 1, 2, 4, 8, 16, 30, 60)


@dataclass
class ClientMetrics:
    """
    Counters for the rate limited client's retry loop.

    Thread Safety:
        All updates happen under a threading.Lock, so one instance can be
        shared by clients used from several threads.

    Example:
        >>> metrics = ClientMetrics()
        >>> metrics.record_retry("openai", "transient", 2.0)
        >>> metrics.get_stats()["retries"]
        1
    """

    attempts: int = 0
    successes: int = 0
    quota_denials: int = 0
    retries: int = 0
    non_retryable_failures: int = 0
    quota_failures: int = 0
    exhausted: int = 0
    total_delay_seconds: float = 0.0

    _by_provider: defaultdict[str, dict[str, float]] = field(
        default_factory=lambda: defaultdict(dict), repr=False
    )
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _tally(self, provider: str, name: str, amount: float = 1) -> None:
        """Add to a provider's breakdown. Caller holds the lock."""
        tally = self._by_provider[provider]
        tally[name] = tally.get(name, 0) + amount

    def record_attempt(self, provider: str) -> None:
        with self._lock:
            self.attempts += 1
            self._tally(provider, "attempts")

    def record_success(self, provider: str) -> None:
        with self._lock:
            self.successes += 1
            self._tally(provider, "successes")

    def record_quota_denial(self, provider: str) -> None:
        with self._lock:
            self.quota_denials += 1
            self._tally(provider, "quota_denials")

    def record_retry(self, provider: str, reason: str, delay: float) -> None:
        with self._lock:
            self.retries += 1
            self.total_delay_seconds += delay
            self._tally(provider, "retries")
            self._tally(provider, "total_delay_seconds", delay)

    def record_failure(self, provider: str, outcome: str) -> None:
        with self._lock:
            if outcome == "exhausted":
                self.exhausted += 1
                self._tally(provider, "exhausted")
            elif outcome == "quota":
                self.quota_failures += 1
                self._tally(provider, "quota_failures")
            else:
                self.non_retryable_failures += 1
                self._tally(provider, "non_retryable_failures")

    def get_stats(self) -> dict[str, Any]:
        """Snapshot of all counters as JSON-serializable values.

        ``by_provider`` maps each provider to the counters it has touched.
        """
        with self._lock:
            return {
                "attempts": self.attempts,
                "successes": self.successes,
                "quota_denials": self.quota_denials,
                "retries": self.retries,
                "non_retryable_failures": self.non_retryable_failures,
                "quota_failures": self.quota_failures,
                "exhausted": self.exhausted,
                "total_delay_seconds": self.total_delay_seconds,
                "by_provider": {
                    provider: dict(tally)
                    for provider, tally in self._by_provider.items()
                },
            }

    def reset(self) -> None:
        with self._lock:
            self.attempts = 0
            self.successes = 0
            self.quota_denials = 0
            self.retries = 0
            self.non_retryable_failures = 0
            self.quota_failures = 0
            self.exhausted = 0
            self.total_delay_seconds = 0.0
            self._by_provider.clear()


class PrometheusClientMetrics:
    """
    Prometheus metrics for the rate limited client.

    Metrics:
        - llm_ratelimit_attempts_total: Attempts that entered the limiter
        - llm_ratelimit_successes_total: Successful executor calls
        - llm_ratelimit_quota_denials_total: Quota exceeded events
        - llm_ratelimit_retries_total: Scheduled retries, by reason
        - llm_ratelimit_failures_total: Terminal failures, by outcome
        - llm_ratelimit_retry_delay_seconds: Histogram of retry delays

    Pass a dedicated CollectorRegistry when creating more than one instance
    in a process; prometheus_client rejects duplicate registrations.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        kwargs: dict[str, Any] = {}
        if registry is not None:
            kwargs["registry"] = registry

        self.attempts = Counter(
            "llm_ratelimit_attempts_total",
            "Attempts that entered the rate limiter",
            ["provider"],
            **kwargs,
        )
        self.successes = Counter(
            "llm_ratelimit_successes_total",
            "Requests that returned a result",
            ["provider"],
            **kwargs,
        )
        self.quota_denials = Counter(
            "llm_ratelimit_quota_denials_total",
            "Quota exceeded events from the limiter or the vendor",
            ["provider"],
            **kwargs,
        )
        self.retries = Counter(
            "llm_ratelimit_retries_total",
            "Retries scheduled by the rate limited client",
            ["provider", "reason"],  # Values: quota, transient
            **kwargs,
        )
        self.failures = Counter(
            "llm_ratelimit_failures_total",
            "Requests that failed for good",
            ["provider", "outcome"],  # Values: non_retryable, quota, exhausted
            **kwargs,
        )
        self.retry_delay_seconds = Histogram(
            "llm_ratelimit_retry_delay_seconds",
            "Delay applied before each retry",
            ["provider"],
            buckets=RETRY_DELAY_BUCKETS,
            **kwargs,
        )
        logger.info("Prometheus client metrics initialized")

    def record_attempt(self, provider: str) -> None:
        self.attempts.labels(provider=provider).inc()

    def record_success(self, provider: str) -> None:
        self.successes.labels(provider=provider).inc()

    def record_quota_denial(self, provider: str) -> None:
        self.quota_denials.labels(provider=provider).inc()

    def record_retry(self, provider: str, reason: str, delay: float) -> None:
        self.retries.labels(provider=provider, reason=reason).inc()
        self.retry_delay_seconds.labels(provider=provider).observe(delay)

    def record_failure(self, provider: str, outcome: str) -> None:
        self.failures.labels(provider=provider, outcome=outcome).inc()


__all__ = [
    "RETRY_DELAY_BUCKETS",
    "ClientMetrics",
    "PrometheusClientMetrics",
]
