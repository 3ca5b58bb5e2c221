"""
Shared fixtures for benchmark tests.
"""

import pytest

from llm_ratelimit.client import RecordingDelay
from llm_ratelimit.limiter import ProviderQuota, TokenBucketRateLimiter
from llm_ratelimit.types import Model, Provider


class BenchmarkClient:
    """Minimal client that returns instantly, so timings measure overhead only."""

    @property
    def provider(self) -> Provider:
        return Provider.OPENAI

    def supports(self, model: Model) -> bool:
        return True

    def request(self, model, payload, options=None):
        return {"result": "instant"}


@pytest.fixture
def benchmark_model():
    return Model(id="benchmark-model", provider=Provider.OPENAI, max_tokens=128_000)


@pytest.fixture
def unlimited_limiter():
    """Limiter with quotas high enough that benchmarks never wait."""
    return TokenBucketRateLimiter(
        quotas={
            Provider.OPENAI: ProviderQuota.per_minute(
                requests=10_000_000, tokens=10_000_000_000
            )
        }
    )


@pytest.fixture
def benchmark_client():
    return BenchmarkClient()


@pytest.fixture
def recording_delay():
    return RecordingDelay()


@pytest.fixture
def chat_payload():
    return {
        "messages": [
            {"role": "system", "content": "You are a concise assistant."},
            {
                "role": "user",
                "content": (
                    "Explain token buckets in two sentences. Reference "
                    "https://en.wikipedia.org/wiki/Token_bucket and return "
                    'JSON like {"summary": "...", "sources": ["..."]}.'
                ),
            },
        ]
    }
