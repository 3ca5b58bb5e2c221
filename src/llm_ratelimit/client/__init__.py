# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Rate limited client and its retry machinery.

Available components:
- RateLimitedClient: Decorates a ClientProtocol with quota admission and retries
- RetryConfig: Attempt budget and backoff bounds
- classify_error: Maps a failure to RATE_LIMITED, RETRYABLE or NON_RETRYABLE
- SystemDelay / RecordingDelay: Blocking and recording delay implementations
"""

from .delay import RecordingDelay, SystemDelay
from .rate_limited import RateLimitedClient
from .retry import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    RETRYABLE_PATTERNS,
    ErrorClass,
    ErrorClassifier,
    RetryConfig,
    calculate_backoff,
    classify_error,
)

__all__ = [
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "RETRYABLE_PATTERNS",
    "ErrorClass",
    "ErrorClassifier",
    "RateLimitedClient",
    "RecordingDelay",
    "RetryConfig",
    "SystemDelay",
    "calculate_backoff",
    "classify_error",
]
