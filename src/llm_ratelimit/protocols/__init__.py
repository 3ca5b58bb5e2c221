# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for pluggable components.

Available protocols:
- ClientProtocol: Vendor client executing requests
- TokenEstimatorProtocol: Heuristic token estimation
- RateLimiterProtocol: Quota admission
- DelayProtocol: Blocking sleep seam
- ExternalRateLimiterProtocol: Host-supplied bucket backends
"""

from .client import ClientProtocol
from .delay import DelayProtocol
from .estimator import TokenEstimatorProtocol
from .external import ExternalRateLimiterProtocol
from .limiter import RateLimiterProtocol

__all__ = [
    "ClientProtocol",
    "DelayProtocol",
    "ExternalRateLimiterProtocol",
    "RateLimiterProtocol",
    "TokenEstimatorProtocol",
]
