# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Quota configuration for the rate limiter.

Built-in defaults are conservative per-minute limits for each known provider
and a generic default for everything else.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from ..exceptions import ConfigurationError
from ..types.provider import Provider
from ..types.rate_limit import BucketPolicy, RateLimitDimension


@dataclass(frozen=True)
class ProviderQuota:
    """
    Request and token bucket policies for one provider.

    Attributes:
        requests: Policy for the request-count dimension
        tokens: Policy for the token-volume dimension
    """

    requests: BucketPolicy
    tokens: BucketPolicy

    @classmethod
    def per_minute(cls, requests: int, tokens: int) -> "ProviderQuota":
        return cls(
            requests=BucketPolicy.per_minute(requests),
            tokens=BucketPolicy.per_minute(tokens),
        )

    @classmethod
    def default_for(cls, provider: Provider) -> "ProviderQuota":
        """Built-in quota for ``provider`` (UNKNOWN gets the generic default)."""
        return cls.per_minute(
            provider.default_requests_per_minute,
            provider.default_tokens_per_minute,
        )

    def policy_for(self, dimension: RateLimitDimension) -> BucketPolicy:
        if dimension is RateLimitDimension.REQUESTS:
            return self.requests
        return self.tokens


DEFAULT_PROVIDER_QUOTAS: Mapping[Provider, ProviderQuota] = {
    provider: ProviderQuota.default_for(provider) for provider in Provider
}


def build_quota_table(
    overrides: Mapping[Provider, ProviderQuota] | None = None,
) -> dict[Provider, ProviderQuota]:
    """
    Merge quota overrides over the built-in defaults.

    Overrides replace a provider's whole profile; they never patch one
    dimension of a default.

    Raises:
        ConfigurationError: If an override is keyed by something other than a
            Provider or is not a ProviderQuota
    """
    table = dict(DEFAULT_PROVIDER_QUOTAS)
    for provider, quota in (overrides or {}).items():
        if not isinstance(provider, Provider):
            raise ConfigurationError(
                f"Quota overrides must be keyed by Provider, got {provider!r}"
            )
        if not isinstance(quota, ProviderQuota):
            raise ConfigurationError(
                f"Quota override for '{provider.value}' must be a ProviderQuota, "
                f"got {type(quota).__name__}"
            )
        table[provider] = quota
    return table


__all__ = [
    "DEFAULT_PROVIDER_QUOTAS",
    "ProviderQuota",
    "build_quota_table",
]
