# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
External rate limiter seam.

Resolution of bucket backends for a provider lives here: for each quota
dimension the external rate limiter wins if it declares a backend, otherwise
the internal in-memory bucket is used. The two dimensions are decided
independently.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from ..backends.base import BucketBackend
from ..exceptions import ConfigurationError
from ..protocols.external import ExternalRateLimiterProtocol
from ..types.model import Model
from ..types.provider import Provider
from ..types.rate_limit import ConsumeResult, RateLimitDimension

logger = logging.getLogger(__name__)

DEFAULT_KEY_FORMAT = "{provider}_{dimension}"


def bucket_key(provider: Provider, dimension: RateLimitDimension) -> str:
    """Default bucket key, e.g. 'openai_requests'."""
    return DEFAULT_KEY_FORMAT.format(provider=provider.value, dimension=dimension.value)


@dataclass(frozen=True)
class BoundBucket:
    """
    A backend together with the key to use against it.

    Attributes:
        backend: Backend holding the bucket state
        key: Bucket key within the backend
        external: Whether the backend came from the external rate limiter
    """

    backend: BucketBackend
    key: str
    external: bool = False

    def consume(self, amount: float = 1) -> ConsumeResult:
        return self.backend.consume(self.key, amount)

    def wait_time(self, amount: float = 1) -> float:
        return self.backend.wait_time(self.key, amount)


@dataclass(frozen=True)
class ResolvedBackends:
    """Backends for both quota dimensions of one provider."""

    requests: BoundBucket
    tokens: BoundBucket

    def for_dimension(self, dimension: RateLimitDimension) -> BoundBucket:
        if dimension is RateLimitDimension.REQUESTS:
            return self.requests
        return self.tokens

    @property
    def is_mixed(self) -> bool:
        return self.requests.external != self.tokens.external

    def for_model(
        self, model: Model, external: ExternalRateLimiterProtocol | None
    ) -> "ResolvedBackends":
        """
        The same backends with external keys recomputed for ``model``.

        Backends are shared by every model of a provider, but an external
        rate limiter may key its buckets per model.
        """
        if external is None or not (self.requests.external or self.tokens.external):
            return self
        return ResolvedBackends(
            requests=_rekeyed(self.requests, RateLimitDimension.REQUESTS, model, external),
            tokens=_rekeyed(self.tokens, RateLimitDimension.TOKENS, model, external),
        )


def _rekeyed(
    bound: BoundBucket,
    dimension: RateLimitDimension,
    model: Model,
    external: ExternalRateLimiterProtocol,
) -> BoundBucket:
    if not bound.external:
        return bound
    key = external.get_key(model.provider, dimension, model)
    if key == bound.key:
        return bound
    return replace(bound, key=key)


InternalBackendFactory = Callable[[Provider, RateLimitDimension], BucketBackend]


def resolve_backends(
    model: Model,
    internal_factory: InternalBackendFactory,
    external: ExternalRateLimiterProtocol | None = None,
) -> ResolvedBackends:
    """
    Pick the backend for each dimension of the model's provider.

    Args:
        model: Model whose provider is being resolved
        internal_factory: Builds the in-memory fallback for a dimension
        external: Optional host-supplied rate limiter

    Returns:
        ResolvedBackends with one BoundBucket per dimension

    Raises:
        ConfigurationError: If the external rate limiter declares a backend
            but does not return one
    """
    provider = model.provider
    bound: dict[RateLimitDimension, BoundBucket] = {}

    for dimension in RateLimitDimension:
        if external is not None and external.has_backend(provider, dimension):
            backend = external.get_backend(provider, dimension, model)
            if not isinstance(backend, BucketBackend):
                raise ConfigurationError(
                    f"External rate limiter declared a '{dimension.value}' backend "
                    f"for '{provider.value}' but returned {type(backend).__name__}"
                )
            key = external.get_key(provider, dimension, model)
            bound[dimension] = BoundBucket(backend=backend, key=key, external=True)
        else:
            bound[dimension] = BoundBucket(
                backend=internal_factory(provider, dimension),
                key=bucket_key(provider, dimension),
            )

    resolved = ResolvedBackends(
        requests=bound[RateLimitDimension.REQUESTS],
        tokens=bound[RateLimitDimension.TOKENS],
    )
    if resolved.requests.external or resolved.tokens.external:
        logger.debug(
            f"Using mixed external/internal rate limiters for provider '{provider.value}'",
            extra={
                "provider": provider.value,
                "model": model.id,
                "external_requests": resolved.requests.external,
                "external_tokens": resolved.tokens.external,
            },
        )
    else:
        logger.debug(
            f"Using internal rate limiters for provider '{provider.value}'",
            extra={"provider": provider.value, "model": model.id},
        )
    return resolved


class MappingExternalRateLimiter:
    """
    External rate limiter backed by a plain mapping of backends.

    Lets a host application hand over the backends it already built (for
    example, buckets kept in shared storage) without writing a class.

    Example:
        >>> external = MappingExternalRateLimiter(
        ...     {(Provider.OPENAI, RateLimitDimension.TOKENS): shared_backend}
        ... )
        >>> limiter = TokenBucketRateLimiter(external=external)
    """

    def __init__(
        self,
        backends: Mapping[tuple[Provider, RateLimitDimension], BucketBackend],
        key_format: str = DEFAULT_KEY_FORMAT,
    ) -> None:
        """
        Args:
            backends: Backends keyed by (provider, dimension)
            key_format: Format string for bucket keys. Receives ``provider``,
                ``dimension`` and ``model`` fields.
        """
        for (provider, dimension), backend in backends.items():
            if not isinstance(provider, Provider) or not isinstance(
                dimension, RateLimitDimension
            ):
                raise ConfigurationError(
                    "External backends must be keyed by (Provider, RateLimitDimension), "
                    f"got {(provider, dimension)!r}"
                )
            if not isinstance(backend, BucketBackend):
                raise ConfigurationError(
                    f"Backend for {provider.value}/{dimension.value} must be a "
                    f"BucketBackend, got {type(backend).__name__}"
                )
        self._backends = dict(backends)
        self._key_format = key_format

    def has_backend(self, provider: Provider, dimension: RateLimitDimension) -> bool:
        return (provider, dimension) in self._backends

    def get_backend(
        self, provider: Provider, dimension: RateLimitDimension, model: Model
    ) -> BucketBackend:
        try:
            return self._backends[(provider, dimension)]
        except KeyError:
            raise ConfigurationError(
                f"No external backend for {provider.value}/{dimension.value}"
            ) from None

    def get_key(
        self, provider: Provider, dimension: RateLimitDimension, model: Model
    ) -> str:
        return self._key_format.format(
            provider=provider.value, dimension=dimension.value, model=model.id
        )


__all__ = [
    "BoundBucket",
    "InternalBackendFactory",
    "MappingExternalRateLimiter",
    "ResolvedBackends",
    "bucket_key",
    "resolve_backends",
]
