# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Token bucket rate limiter for LLM providers.

Enforces two independent quota dimensions per provider: request count and
estimated token volume. Buckets are created lazily per provider on first use
and live for the lifetime of the limiter.
"""

import logging
import threading
import time
from collections.abc import Mapping

from ..backends.base import BucketBackend
from ..backends.memory import Clock, InMemoryTokenBucket, LockFactory
from ..exceptions import ConfigurationError, RateLimitExceededError
from ..protocols.external import ExternalRateLimiterProtocol
from ..types.model import Model
from ..types.provider import Provider
from ..types.rate_limit import LimitCheckResult, RateLimitDimension
from .config import ProviderQuota, build_quota_table
from .external import ResolvedBackends, bucket_key, resolve_backends

_DENIAL_MESSAGES = {
    RateLimitDimension.REQUESTS: "Request rate limit exceeded",
    RateLimitDimension.TOKENS: "Token rate limit exceeded",
}


class TokenBucketRateLimiter:
    """
    Per-provider request and token quotas backed by token buckets.

    Each dimension of each provider is served by either an external backend
    (when the external rate limiter declares one) or an internal in-memory
    bucket with the provider's quota policy.

    Thread Safety:
        Internal buckets hold one lock per bucket (from ``lock_factory``)
        around fetch-refill-consume. Backend resolution for a provider happens
        once, under a limiter-wide lock.

    Example:
        >>> limiter = TokenBucketRateLimiter()
        >>> limiter.consume(model, estimated_tokens=350)
        >>> limiter.get_retry_after(model) is None
        True
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        lock_factory: LockFactory | None = None,
        external: ExternalRateLimiterProtocol | None = None,
        quotas: Mapping[Provider, ProviderQuota] | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """
        Args:
            logger: Logger receiving quota decisions. Defaults to the module logger.
            lock_factory: Lock constructor for internal buckets.
                Defaults to threading.Lock.
            external: Optional host-supplied rate limiter consulted per
                provider and dimension before the internal defaults
            quotas: Per-provider quota overrides, each replacing the built-in
                profile for that provider
            clock: Monotonic time source used by internal buckets
        """
        self._logger = logger or logging.getLogger(__name__)
        self._lock_factory = lock_factory
        self._external = external
        self._quotas = build_quota_table(quotas)
        self._clock = clock

        self._resolved: dict[Provider, ResolvedBackends] = {}
        self._internal: dict[tuple[Provider, RateLimitDimension], InMemoryTokenBucket] = {}
        self._resolve_lock = threading.Lock()

    # ==========================================================================
    # Quota operations
    # ==========================================================================

    def check(self, model: Model, estimated_tokens: int = 1) -> LimitCheckResult:
        """
        Try to admit a request and report the outcome as a value.

        The request dimension is consumed first. If the token dimension then
        refuses, the request already taken is not returned to its bucket.

        Args:
            model: Model the request targets
            estimated_tokens: Estimated token cost of the request

        Returns:
            LimitCheckResult; on denial ``retry_after`` and ``dimension`` say
            how long to wait and which quota refused

        Raises:
            ConfigurationError: If the estimate exceeds the token bucket capacity
        """
        if estimated_tokens < 0:
            raise ValueError("estimated_tokens must not be negative")

        backends = self._backends_for(model)
        self._check_capacity(backends, model, estimated_tokens)
        context = {
            "model": model.id,
            "provider": model.provider.value,
            "estimated_tokens": estimated_tokens,
        }

        requests = backends.requests.consume(1)
        if not requests.accepted:
            return self._denied(
                RateLimitDimension.REQUESTS, requests.retry_after, context
            )

        tokens = backends.tokens.consume(estimated_tokens)
        if not tokens.accepted:
            return self._denied(RateLimitDimension.TOKENS, tokens.retry_after, context)

        self._logger.debug(
            f"Rate limit check passed for {model.provider.value}/{model.id}",
            extra={
                **context,
                "requests_limiter": "external" if backends.requests.external else "internal",
                "tokens_limiter": "external" if backends.tokens.external else "internal",
            },
        )
        return LimitCheckResult(
            accepted=True,
            remaining_requests=requests.remaining,
            remaining_tokens=tokens.remaining,
        )

    def consume(self, model: Model, estimated_tokens: int = 1) -> None:
        """
        Take one request and ``estimated_tokens`` tokens from the provider quota.

        Raises:
            RateLimitExceededError: If either dimension refuses the request
            ConfigurationError: If the estimate can never fit the token bucket
        """
        result = self.check(model, estimated_tokens)
        if result.denied:
            assert result.dimension is not None
            raise RateLimitExceededError(
                retry_after=result.retry_after,
                message=_DENIAL_MESSAGES[result.dimension],
                provider=model.provider,
                dimension=result.dimension,
            )

    def is_allowed(self, model: Model, estimated_tokens: int = 1) -> bool:
        """
        Whether the request is admitted.

        This performs a real consume: an admitted request has already been
        charged against both quotas. Use ``peek`` for a read-only check.
        """
        return self.check(model, estimated_tokens).accepted

    def peek(self, model: Model, estimated_tokens: int = 1) -> LimitCheckResult:
        """Report whether a request would be admitted, without consuming anything."""
        backends = self._backends_for(model)
        self._check_capacity(backends, model, estimated_tokens)
        request_wait = backends.requests.wait_time(1)
        token_wait = backends.tokens.wait_time(estimated_tokens)

        if request_wait <= 0 and token_wait <= 0:
            return LimitCheckResult(accepted=True)
        if request_wait >= token_wait:
            return LimitCheckResult(
                accepted=False,
                retry_after=request_wait,
                dimension=RateLimitDimension.REQUESTS,
            )
        return LimitCheckResult(
            accepted=False,
            retry_after=token_wait,
            dimension=RateLimitDimension.TOKENS,
        )

    def get_retry_after(self, model: Model) -> float | None:
        """
        Seconds until both dimensions can admit one more unit.

        Returns:
            The longer of the two waits, or None when neither is constrained
        """
        backends = self._backends_for(model)
        wait = max(backends.requests.wait_time(1), backends.tokens.wait_time(1))
        return wait if wait > 0 else None

    def reset(self, model: Model | None = None) -> None:
        """
        Refill the internal buckets for one model's provider, or for all providers.

        External backends are left untouched; their state belongs to the host.
        """
        with self._resolve_lock:
            buckets = [
                (bucket, provider, dimension)
                for (provider, dimension), bucket in self._internal.items()
                if model is None or provider is model.provider
            ]
        for bucket, provider, dimension in buckets:
            bucket.reset(bucket_key(provider, dimension))

    def quota_for(self, provider: Provider) -> ProviderQuota:
        return self._quotas.get(provider, self._quotas[Provider.UNKNOWN])

    # ==========================================================================
    # Backend resolution
    # ==========================================================================

    def _backends_for(self, model: Model) -> ResolvedBackends:
        """Backends for the model's provider, keyed for this model."""
        resolved = self._resolved.get(model.provider)
        if resolved is None:
            with self._resolve_lock:
                resolved = self._resolved.get(model.provider)
                if resolved is None:
                    resolved = resolve_backends(
                        model, self._internal_backend, external=self._external
                    )
                    self._resolved[model.provider] = resolved
        return resolved.for_model(model, self._external)

    def _check_capacity(
        self, backends: ResolvedBackends, model: Model, estimated_tokens: int
    ) -> None:
        capacity = backends.tokens.backend.capacity
        if capacity is not None and estimated_tokens > capacity:
            raise ConfigurationError(
                f"Estimated {estimated_tokens} tokens exceed the token quota capacity "
                f"of {capacity:.0f} for provider '{model.provider.value}'"
            )

    def _internal_backend(
        self, provider: Provider, dimension: RateLimitDimension
    ) -> BucketBackend:
        """Build the in-memory bucket for a dimension. Caller holds the resolve lock."""
        bucket = InMemoryTokenBucket(
            policy=self.quota_for(provider).policy_for(dimension),
            namespace=f"llm_ratelimit:{provider.value}",
            lock_factory=self._lock_factory,
            clock=self._clock,
        )
        self._internal[(provider, dimension)] = bucket
        return bucket

    def _denied(
        self,
        dimension: RateLimitDimension,
        retry_after: float,
        context: dict[str, object],
    ) -> LimitCheckResult:
        self._logger.warning(
            f"{_DENIAL_MESSAGES[dimension]} for {context['provider']}/{context['model']}, "
            f"retry after {retry_after:.2f}s",
            extra={**context, "dimension": dimension.value, "retry_after": retry_after},
        )
        return LimitCheckResult(
            accepted=False, retry_after=retry_after, dimension=dimension
        )


__all__ = ["TokenBucketRateLimiter"]
