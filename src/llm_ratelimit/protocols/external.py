# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for host-supplied rate limiter backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..types.model import Model
from ..types.provider import Provider
from ..types.rate_limit import RateLimitDimension

if TYPE_CHECKING:
    from ..backends.base import BucketBackend


@runtime_checkable
class ExternalRateLimiterProtocol(Protocol):
    """
    Lets a host application supply bucket backends per provider and dimension.

    Typical implementations hand out backends that keep state in shared
    storage so that several processes draw from the same quota. Dimensions
    without an external backend fall back to the in-memory defaults.
    """

    def has_backend(self, provider: Provider, dimension: RateLimitDimension) -> bool:
        """Whether a backend is available for this provider and dimension."""
        ...

    def get_backend(
        self, provider: Provider, dimension: RateLimitDimension, model: Model
    ) -> BucketBackend:
        """Return the backend for this provider and dimension."""
        ...

    def get_key(
        self, provider: Provider, dimension: RateLimitDimension, model: Model
    ) -> str:
        """Return the bucket key to use with the backend."""
        ...
