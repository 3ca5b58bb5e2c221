# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""LLM Rate Limit - Quota enforcement and retries for multi-provider LLM clients.

This library sits between application code and vendor LLM clients. It
estimates the token cost of a request, admits it against per-provider request
and token quotas, and retries failed calls according to how they failed.

Key Features:
    - Heuristic token estimation for OpenAI, Anthropic and Gemini payloads
    - Token bucket quotas per provider on requests/minute and tokens/minute
    - Pluggable external backends per (provider, dimension) for shared quotas
    - Classified retries with exponential backoff and injectable delays
    - In-process and Prometheus metrics for the retry loop

Quick Start:
    >>> from llm_ratelimit import (
    ...     Model,
    ...     Provider,
    ...     RateLimitedClient,
    ...     TokenBucketRateLimiter,
    ...     TokenEstimatorRegistry,
    ... )
    >>>
    >>> class MyClient:
    ...     provider = Provider.OPENAI
    ...     def supports(self, model):
    ...         return model.provider is Provider.OPENAI
    ...     def request(self, model, payload, options=None):
    ...         return call_vendor_api(model, payload, options)
    >>>
    >>> client = RateLimitedClient(
    ...     MyClient(),
    ...     TokenBucketRateLimiter(),
    ...     TokenEstimatorRegistry.create_default(),
    ... )
    >>> model = Model(id="gpt-4o", provider="openai", max_tokens=4096)
    >>> result = client.request(model, {"messages": [{"role": "user", "content": "Hi"}]})

Main Exports:
    - RateLimitedClient, RetryConfig: Retrying client decorator
    - TokenBucketRateLimiter, ProviderQuota: Quota enforcement
    - MappingExternalRateLimiter, BucketBackend: External backend seam
    - TokenEstimatorRegistry and per-provider estimators
    - ClientMetrics, PrometheusClientMetrics: Observability

Version: 1.0.0
"""

__version__ = "1.0.0"

from .backends import BucketBackend, InMemoryTokenBucket
from .client import (
    ErrorClass,
    RateLimitedClient,
    RecordingDelay,
    RetryConfig,
    SystemDelay,
    calculate_backoff,
    classify_error,
)
from .estimators import (
    AnthropicTokenEstimator,
    BaseTokenEstimator,
    EstimatorCoefficients,
    GeminiTokenEstimator,
    GenericTokenEstimator,
    OpenAITokenEstimator,
    TokenEstimatorRegistry,
)
from .exceptions import (
    BackendOperationError,
    ClientError,
    ConfigurationError,
    LLMRateLimitError,
    RateLimitExceededError,
    RetriesExhaustedError,
)
from .limiter import (
    DEFAULT_PROVIDER_QUOTAS,
    MappingExternalRateLimiter,
    ProviderQuota,
    TokenBucketRateLimiter,
)
from .observability import ClientMetrics, PrometheusClientMetrics
from .protocols import (
    ClientProtocol,
    DelayProtocol,
    ExternalRateLimiterProtocol,
    RateLimiterProtocol,
    TokenEstimatorProtocol,
)
from .types import (
    BucketPolicy,
    LimitCheckResult,
    Model,
    Payload,
    Provider,
    RateLimitDimension,
)

__all__ = [
    "DEFAULT_PROVIDER_QUOTAS",
    "AnthropicTokenEstimator",
    "BackendOperationError",
    "BaseTokenEstimator",
    "BucketBackend",
    "BucketPolicy",
    "ClientError",
    "ClientMetrics",
    "ClientProtocol",
    "ConfigurationError",
    "DelayProtocol",
    "ErrorClass",
    "EstimatorCoefficients",
    "ExternalRateLimiterProtocol",
    "GeminiTokenEstimator",
    "GenericTokenEstimator",
    "InMemoryTokenBucket",
    "LLMRateLimitError",
    "LimitCheckResult",
    "MappingExternalRateLimiter",
    "Model",
    "OpenAITokenEstimator",
    "Payload",
    "PrometheusClientMetrics",
    "Provider",
    "ProviderQuota",
    "RateLimitDimension",
    "RateLimitExceededError",
    "RateLimitedClient",
    "RateLimiterProtocol",
    "RecordingDelay",
    "RetriesExhaustedError",
    "RetryConfig",
    "SystemDelay",
    "TokenBucketRateLimiter",
    "TokenEstimatorProtocol",
    "__version__",
    "calculate_backoff",
    "classify_error",
]
