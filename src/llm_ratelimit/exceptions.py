# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the llm_ratelimit library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from LLMRateLimitError, making it easy to catch
all library-originated exceptions with a single except clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types.provider import Provider
    from .types.rate_limit import RateLimitDimension


class LLMRateLimitError(Exception):
    """Base exception for all llm_ratelimit errors.

    Example:
        try:
            client.request(model, payload)
        except LLMRateLimitError as e:
            logger.error(f"Rate limited client error: {e}")
    """

    pass


class RateLimitExceededError(LLMRateLimitError):
    """Raised when a quota bucket cannot admit a request.

    Raised by rate limiters when either the request-count or the token-volume
    bucket for a provider is exhausted. Executors may raise it as well when the
    vendor answers with an explicit rate limit; the rate limited client handles
    both the same way.

    Attributes:
        retry_after: Seconds to wait before trying again. Never negative.
        provider: The provider whose quota was exceeded, if known.
        dimension: Which quota dimension refused the request, if known.

    Example:
        try:
            limiter.consume(model, estimated_tokens=1200)
        except RateLimitExceededError as e:
            time.sleep(e.retry_after)
    """

    def __init__(
        self,
        retry_after: float = 0.0,
        message: str = "Rate limit exceeded",
        provider: Provider | None = None,
        dimension: RateLimitDimension | None = None,
    ):
        super().__init__(message)
        self.retry_after = max(0.0, float(retry_after))
        self.provider = provider
        self.dimension = dimension


class RetriesExhaustedError(LLMRateLimitError):
    """Raised when every allowed attempt ended in a retryable failure.

    This is deliberately distinct from the underlying error. The last
    underlying error is available through ``__cause__``.

    Attributes:
        attempts: Number of attempts that were made.
    """

    def __init__(
        self,
        message: str = "Failed to execute request after maximum retries",
        attempts: int = 0,
    ):
        super().__init__(message)
        self.attempts = attempts


class ConfigurationError(LLMRateLimitError):
    """Raised when a component is wired with an invalid configuration.

    Common causes include:
    - An external rate limiter declaring a backend but returning none
    - Quota overrides keyed by something other than a Provider
    - Estimator registrations that do not satisfy the estimator protocol
    """

    pass


class BackendOperationError(LLMRateLimitError):
    """Raised when a bucket backend fails to perform an operation.

    External backends should wrap their storage errors in this exception so
    that the rate limited client treats them as non-quota failures.
    """

    pass


class ClientError(LLMRateLimitError):
    """Base class for failures raised by request executors.

    Executors are free to raise any exception, but using this class gives
    callers a status code to inspect alongside the message.

    Attributes:
        status_code: HTTP status code returned by the vendor API, if any.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "BackendOperationError",
    "ClientError",
    "ConfigurationError",
    "LLMRateLimitError",
    "RateLimitExceededError",
    "RetriesExhaustedError",
]
