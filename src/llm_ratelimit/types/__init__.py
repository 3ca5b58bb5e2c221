# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Core data types: providers, model descriptors and rate limit results."""

from .model import Model
from .payload import Payload
from .provider import KNOWN_PROVIDERS, Provider
from .rate_limit import (
    BucketPolicy,
    ConsumeResult,
    LimitCheckResult,
    RateLimitDimension,
)

__all__ = [
    "KNOWN_PROVIDERS",
    "BucketPolicy",
    "ConsumeResult",
    "LimitCheckResult",
    "Model",
    "Payload",
    "Provider",
    "RateLimitDimension",
]
