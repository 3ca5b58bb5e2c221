# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Retry configuration and error classification.

Executors report failures as arbitrary exceptions, so classification works on
the exception type for quota errors and on the message text for everything
else. All of it sits behind ``classify_error`` so it can be replaced with a
classifier that understands typed error codes.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..exceptions import RateLimitExceededError

DEFAULT_MAX_RETRIES = 10
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0

# Matched case-insensitively against the exception message
RETRYABLE_PATTERNS = (
    "timeout",
    "connection",
    "network",
    "temporary",
    "service unavailable",
    "too many requests",
    "rate limit",
    "idle timeout",
)

_SERVER_ERROR_RE = re.compile(r"API returned status 5\d{2}")

# Non-5xx status codes that classify as retryable
_RETRYABLE_STATUS_CODES = frozenset({408, 429})

# 2**62 is far beyond any sane delay cap
_MAX_EXPONENT = 62


class ErrorClass(Enum):
    """How the retry loop reacts to a failure.

    - RATE_LIMITED: Quota exceeded; wait for the reported retry-after
    - RETRYABLE: Transient failure; wait with exponential backoff
    - NON_RETRYABLE: Propagate immediately
    """

    RATE_LIMITED = "rate_limited"
    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"


ErrorClassifier = Callable[[BaseException], ErrorClass]


def classify_error(error: BaseException) -> ErrorClass:
    """
    Classify a failure raised by the limiter or the executor.

    Args:
        error: The exception to classify

    Returns:
        RATE_LIMITED for RateLimitExceededError, RETRYABLE for a 408, 429 or
        5xx ``status_code`` attribute (as on ClientError) or for messages that
        look transient (timeouts, network trouble, 5xx statuses, textual rate
        limit hints), NON_RETRYABLE otherwise
    """
    if isinstance(error, RateLimitExceededError):
        return ErrorClass.RATE_LIMITED

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int) and (
        status_code >= 500 or status_code in _RETRYABLE_STATUS_CODES
    ):
        return ErrorClass.RETRYABLE

    message = str(error)
    lowered = message.lower()
    if any(pattern in lowered for pattern in RETRYABLE_PATTERNS):
        return ErrorClass.RETRYABLE
    if _SERVER_ERROR_RE.search(message):
        return ErrorClass.RETRYABLE
    return ErrorClass.NON_RETRYABLE


def calculate_backoff(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> float:
    """
    Exponential backoff for a zero-based attempt index.

    Returns ``min(max_delay, base_delay * 2**attempt)``; with the defaults
    attempts 0..5 give 1, 2, 4, 8, 16, 30 seconds.
    """
    if attempt < 0:
        raise ValueError("attempt must not be negative")
    return min(max_delay, base_delay * (2 ** min(attempt, _MAX_EXPONENT)))


@dataclass(frozen=True)
class RetryConfig:
    """
    Retry behavior of the rate limited client.

    Attributes:
        enable_retries: When False every failure is raised on first occurrence
        max_retries: Total attempts allowed per request (including the first)
        base_delay: Backoff delay for the first retry, in seconds
        max_delay: Upper bound for any backoff delay, in seconds
    """

    enable_retries: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be at least base_delay")

    @property
    def max_attempts(self) -> int:
        return self.max_retries if self.enable_retries else 1

    def backoff(self, attempt: int) -> float:
        return calculate_backoff(attempt, self.base_delay, self.max_delay)


__all__ = [
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "RETRYABLE_PATTERNS",
    "ErrorClass",
    "ErrorClassifier",
    "RetryConfig",
    "calculate_backoff",
    "classify_error",
]
