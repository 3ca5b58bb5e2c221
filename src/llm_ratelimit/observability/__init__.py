# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for the rate limited client.

Classes:
    ClientMetrics: Thread-safe in-process counters
    PrometheusClientMetrics: Prometheus counters and retry delay histogram

Protocols:
    ClientMetricsProtocol: Interface both implementations satisfy
"""

from .metrics import RETRY_DELAY_BUCKETS, ClientMetrics, PrometheusClientMetrics
from .protocols import ClientMetricsProtocol

__all__ = [
    "RETRY_DELAY_BUCKETS",
    "ClientMetrics",
    "ClientMetricsProtocol",
    "PrometheusClientMetrics",
]
