# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Bucket backends for rate limiting state.

Available backends:
- BucketBackend: Abstract base class defining the backend interface
- InMemoryTokenBucket: Per-process token buckets with per-key locking

Shared (multi-process) backends are supplied by the host application through
the external rate limiter seam.
"""

from .base import BucketBackend
from .memory import Clock, InMemoryTokenBucket, LockFactory

__all__ = [
    "BucketBackend",
    "Clock",
    "InMemoryTokenBucket",
    "LockFactory",
]
