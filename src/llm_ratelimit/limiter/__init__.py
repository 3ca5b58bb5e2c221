# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Rate limiting for LLM providers.

Components:
- TokenBucketRateLimiter: Request and token quotas per provider
- ProviderQuota / DEFAULT_PROVIDER_QUOTAS: Built-in and custom quota profiles
- MappingExternalRateLimiter: Ready-made external backend provider
- resolve_backends: Per-dimension external/internal backend resolution
"""

from .config import DEFAULT_PROVIDER_QUOTAS, ProviderQuota, build_quota_table
from .external import (
    BoundBucket,
    MappingExternalRateLimiter,
    ResolvedBackends,
    bucket_key,
    resolve_backends,
)
from .rate_limiter import TokenBucketRateLimiter

__all__ = [
    "DEFAULT_PROVIDER_QUOTAS",
    "BoundBucket",
    "MappingExternalRateLimiter",
    "ProviderQuota",
    "ResolvedBackends",
    "TokenBucketRateLimiter",
    "bucket_key",
    "build_quota_table",
    "resolve_backends",
]
