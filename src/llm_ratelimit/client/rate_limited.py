# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Rate limited client.

Wraps any client implementing ClientProtocol. Each request is estimated once,
admitted through the rate limiter, executed, and retried according to how its
failure is classified:

    Estimating -> Limiting -> RateLimited -> Waiting -> Limiting
                           -> Admitted -> Executing -> Success
                                                    -> RetryableFailure -> Backoff -> Limiting
                                                    -> NonRetryableFailure
                                                    -> AttemptsExhausted

The retry loop blocks the calling thread while waiting. No timeout is applied
to the wrapped client's call; pass one to the client through ``options``.
"""

import logging
from collections.abc import Mapping
from typing import Any, NoReturn

from ..estimators.registry import TokenEstimatorRegistry
from ..exceptions import RetriesExhaustedError
from ..observability.metrics import ClientMetrics
from ..observability.protocols import ClientMetricsProtocol
from ..protocols.client import ClientProtocol
from ..protocols.delay import DelayProtocol
from ..protocols.estimator import TokenEstimatorProtocol
from ..protocols.limiter import RateLimiterProtocol
from ..types.model import Model
from ..types.payload import Payload
from ..types.provider import Provider
from .delay import SystemDelay
from .retry import (
    DEFAULT_MAX_RETRIES,
    ErrorClass,
    ErrorClassifier,
    RetryConfig,
    classify_error,
)


class RateLimitedClient:
    """
    Client decorator adding quota admission and classified retries.

    The caller only ever sees one of: the wrapped client's result, the
    original non-retryable error, the original RateLimitExceededError once the
    attempt budget is spent (or retries are disabled), or RetriesExhaustedError
    after a run of transient failures.

    Example:
        >>> client = RateLimitedClient(
        ...     openai_client,
        ...     TokenBucketRateLimiter(),
        ...     TokenEstimatorRegistry.create_default(),
        ... )
        >>> result = client.request(model, {"messages": [...]})
    """

    def __init__(
        self,
        client: ClientProtocol,
        rate_limiter: RateLimiterProtocol,
        estimator_registry: TokenEstimatorProtocol | None = None,
        logger: logging.Logger | None = None,
        delay: DelayProtocol | None = None,
        enable_retries: bool = True,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_config: RetryConfig | None = None,
        classifier: ErrorClassifier | None = None,
        metrics: ClientMetricsProtocol | None = None,
    ) -> None:
        """
        Args:
            client: Client that executes requests
            rate_limiter: Limiter consulted before every attempt
            estimator_registry: Token estimator, usually a TokenEstimatorRegistry.
                Defaults to TokenEstimatorRegistry.create_default().
            logger: Logger for failures and retry decisions. Defaults to the module logger.
            delay: Delay used while waiting. Defaults to SystemDelay.
            enable_retries: When False, any failure is raised on first occurrence
            max_retries: Attempts allowed per request
            retry_config: Full retry configuration. Overrides ``enable_retries``
                and ``max_retries`` when given.
            classifier: Replacement for classify_error
            metrics: Metrics sink. Defaults to a private ClientMetrics.
        """
        self._client = client
        self._rate_limiter = rate_limiter
        self._estimator: TokenEstimatorProtocol = (
            estimator_registry
            if estimator_registry is not None
            else TokenEstimatorRegistry.create_default()
        )
        self._logger = logger or logging.getLogger(__name__)
        self._delay: DelayProtocol = delay or SystemDelay()
        self._retry = retry_config or RetryConfig(
            enable_retries=enable_retries, max_retries=max_retries
        )
        self._classify: ErrorClassifier = classifier or classify_error
        self.metrics: ClientMetricsProtocol = metrics or ClientMetrics()

    @property
    def provider(self) -> Provider:
        return self._client.provider

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry

    def supports(self, model: Model) -> bool:
        return self._client.supports(model)

    def request(
        self,
        model: Model,
        payload: Payload,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Execute a request through the rate limiter with retries.

        Args:
            model: Target model
            payload: Provider payload or raw text
            options: Request options forwarded to the wrapped client

        Returns:
            Whatever the wrapped client returns

        Raises:
            RateLimitExceededError: Quota still exceeded on the last attempt,
                or on the first one with retries disabled
            RetriesExhaustedError: Every attempt ended in a transient failure
            Exception: The wrapped client's error when it is not retryable
        """
        provider = model.provider.value
        estimated_tokens = self._estimator.estimate(model, payload)
        max_attempts = self._retry.max_attempts
        last_error: Exception | None = None

        for attempt in range(max_attempts):
            self.metrics.record_attempt(provider)
            try:
                self._rate_limiter.consume(model, estimated_tokens)
                result = self._client.request(model, payload, options)
            except Exception as e:
                last_error = e
                error_class = self._classify(e)
                if error_class is ErrorClass.RATE_LIMITED:
                    self._handle_rate_limit(e, model, attempt, max_attempts)
                else:
                    self._handle_failure(e, error_class, model, attempt, max_attempts)
                continue

            self.metrics.record_success(provider)
            return result

        self.metrics.record_failure(provider, "exhausted")
        raise RetriesExhaustedError(
            f"Failed to execute request after {max_attempts} attempts",
            attempts=max_attempts,
        ) from last_error

    def _handle_rate_limit(
        self, error: Exception, model: Model, attempt: int, max_attempts: int
    ) -> None:
        """Wait out a quota denial, or re-raise it when no attempts remain."""
        provider = model.provider.value
        self.metrics.record_quota_denial(provider)

        if attempt >= max_attempts - 1:
            self.metrics.record_failure(provider, "quota")
            self._reraise(error)

        retry_after = max(float(getattr(error, "retry_after", 0.0) or 0.0), 0.0)
        self._logger.warning(
            f"Rate limit exceeded for {provider}/{model.id}. "
            f"Waiting {retry_after:.2f}s before retry.",
            extra={
                "provider": provider,
                "model": model.id,
                "retry_after": retry_after,
                "attempt": attempt + 1,
            },
        )
        self.metrics.record_retry(provider, "quota", retry_after)
        self._delay.delay(retry_after)

    def _handle_failure(
        self,
        error: Exception,
        error_class: ErrorClass,
        model: Model,
        attempt: int,
        max_attempts: int,
    ) -> None:
        """Back off after a transient failure, or re-raise a permanent one."""
        provider = model.provider.value
        self._logger.error(
            f"Request to {provider}/{model.id} failed on attempt {attempt + 1}: {error}",
            extra={
                "provider": provider,
                "model": model.id,
                "attempt": attempt + 1,
                "error": str(error),
                "exception_class": type(error).__name__,
            },
        )

        if not self._retry.enable_retries or error_class is ErrorClass.NON_RETRYABLE:
            self.metrics.record_failure(provider, "non_retryable")
            self._reraise(error)

        if attempt >= max_attempts - 1:
            # Out of attempts; the caller raises RetriesExhaustedError
            return

        backoff = self._retry.backoff(attempt)
        self._logger.warning(
            f"Retryable error occurred. Retrying after {backoff:.0f}s.",
            extra={
                "provider": provider,
                "model": model.id,
                "delay": backoff,
                "attempt": attempt + 1,
                "exception_class": type(error).__name__,
            },
        )
        self.metrics.record_retry(provider, "transient", backoff)
        self._delay.delay(backoff)

    @staticmethod
    def _reraise(error: Exception) -> NoReturn:
        raise error


__all__ = ["RateLimitedClient"]
