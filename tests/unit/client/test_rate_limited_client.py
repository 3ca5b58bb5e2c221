"""Tests for RateLimitedClient."""

import logging

import pytest

from llm_ratelimit.client import (
    ErrorClass,
    RateLimitedClient,
    RecordingDelay,
    RetryConfig,
)
from llm_ratelimit.exceptions import (
    ConfigurationError,
    RateLimitExceededError,
    RetriesExhaustedError,
)
from llm_ratelimit.limiter import ProviderQuota, TokenBucketRateLimiter
from llm_ratelimit.observability import ClientMetrics
from llm_ratelimit.protocols import ClientProtocol
from llm_ratelimit.types import Provider

PAYLOAD = {"messages": [{"role": "user", "content": "Hello world"}]}


class CountingLimiter:
    """Limiter that admits everything and records each consume."""

    def __init__(self):
        self.consumed = []

    def consume(self, model, estimated_tokens=1):
        self.consumed.append((model.id, estimated_tokens))

    def is_allowed(self, model, estimated_tokens=1):
        return True

    def get_retry_after(self, model):
        return None


class CountingEstimator:
    def __init__(self, value=42):
        self.value = value
        self.calls = 0

    def estimate(self, model, payload):
        self.calls += 1
        return self.value


class ClockDelay(RecordingDelay):
    """Records delays and advances a fake clock by the same amount."""

    def __init__(self, clock):
        super().__init__()
        self.clock = clock

    def delay(self, seconds):
        super().delay(seconds)
        self.clock.advance(seconds)


@pytest.fixture
def delay():
    return RecordingDelay()


@pytest.fixture
def limiter():
    return CountingLimiter()


class TestSuccessPath:
    def test_returns_result(self, make_client, limiter, delay, openai_model):
        inner = make_client([{"id": "resp-1"}])
        client = RateLimitedClient(inner, limiter, delay=delay)

        assert client.request(openai_model, PAYLOAD) == {"id": "resp-1"}
        assert delay.count == 0
        assert len(inner.calls) == 1

    def test_options_forwarded(self, make_client, limiter, delay, openai_model):
        inner = make_client()
        client = RateLimitedClient(inner, limiter, delay=delay)
        client.request(openai_model, PAYLOAD, {"timeout": 10})
        assert inner.calls[0] == (openai_model, PAYLOAD, {"timeout": 10})

    def test_consumes_estimated_tokens(self, make_client, limiter, delay, openai_model):
        client = RateLimitedClient(make_client(), limiter, delay=delay)
        client.request(openai_model, PAYLOAD)
        # Default registry: OpenAI estimator, "Hello world"
        assert limiter.consumed == [("gpt-4o-mini", 7)]

    def test_delegates_provider_and_supports(
        self, make_client, limiter, openai_model, anthropic_model
    ):
        client = RateLimitedClient(make_client(), limiter)
        assert isinstance(client, ClientProtocol)
        assert client.provider is Provider.OPENAI
        assert client.supports(openai_model)
        assert not client.supports(anthropic_model)


class TestQuotaRetries:
    def test_quota_twice_then_success(self, make_client, limiter, delay, openai_model):
        inner = make_client(
            [
                RateLimitExceededError(retry_after=1.5),
                RateLimitExceededError(retry_after=2.0),
                {"ok": True},
            ]
        )
        client = RateLimitedClient(inner, limiter, delay=delay)

        assert client.request(openai_model, PAYLOAD) == {"ok": True}
        assert delay.delays == [1.5, 2.0]
        assert len(inner.calls) == 3
        assert len(limiter.consumed) == 3

    def test_estimates_once(self, make_client, limiter, delay, openai_model):
        estimator = CountingEstimator()
        inner = make_client([RateLimitExceededError(1.0), {"ok": True}])
        client = RateLimitedClient(inner, limiter, estimator, delay=delay)
        client.request(openai_model, PAYLOAD)
        assert estimator.calls == 1
        assert limiter.consumed == [("gpt-4o-mini", 42), ("gpt-4o-mini", 42)]

    def test_quota_on_last_attempt_reraised(
        self, make_client, limiter, delay, openai_model
    ):
        errors = [RateLimitExceededError(retry_after=1.0) for _ in range(3)]
        inner = make_client(errors)
        client = RateLimitedClient(inner, limiter, delay=delay, max_retries=3)

        with pytest.raises(RateLimitExceededError) as exc_info:
            client.request(openai_model, PAYLOAD)

        assert exc_info.value is errors[-1]
        assert delay.delays == [1.0, 1.0]

    def test_quota_with_retries_disabled(self, make_client, limiter, delay, openai_model):
        error = RateLimitExceededError(retry_after=5.0)
        client = RateLimitedClient(
            make_client([error]), limiter, delay=delay, enable_retries=False
        )
        with pytest.raises(RateLimitExceededError) as exc_info:
            client.request(openai_model, PAYLOAD)
        assert exc_info.value is error
        assert delay.count == 0

    def test_limiter_denial_waits_then_succeeds(self, make_client, clock, openai_model):
        limiter = TokenBucketRateLimiter(
            quotas={Provider.OPENAI: ProviderQuota.per_minute(requests=1, tokens=1000)},
            clock=clock,
        )
        delay = ClockDelay(clock)
        client = RateLimitedClient(make_client(), limiter, delay=delay)

        client.request(openai_model, PAYLOAD)
        client.request(openai_model, PAYLOAD)

        assert delay.delays == [pytest.approx(60.0)]

    def test_negative_retry_after_waits_zero(self, make_client, limiter, delay, openai_model):
        class VendorThrottled(Exception):
            retry_after = -3.0

        def classifier(error):
            if isinstance(error, VendorThrottled):
                return ErrorClass.RATE_LIMITED
            return ErrorClass.NON_RETRYABLE

        inner = make_client([VendorThrottled("slow down"), {"ok": True}])
        client = RateLimitedClient(inner, limiter, delay=delay, classifier=classifier)
        client.request(openai_model, PAYLOAD)
        assert delay.delays == [0.0]


class TestTransientRetries:
    def test_backoff_schedule(self, make_client, limiter, delay, openai_model):
        inner = make_client(
            [
                RuntimeError("Connection reset"),
                RuntimeError("Read timeout"),
                RuntimeError("API returned status 503"),
                {"ok": True},
            ]
        )
        client = RateLimitedClient(inner, limiter, delay=delay)
        assert client.request(openai_model, PAYLOAD) == {"ok": True}
        assert delay.delays == [1.0, 2.0, 4.0]

    def test_exhausted(self, make_client, limiter, delay, openai_model):
        errors = [RuntimeError(f"network down {i}") for i in range(4)]
        inner = make_client(errors)
        client = RateLimitedClient(inner, limiter, delay=delay, max_retries=4)

        with pytest.raises(RetriesExhaustedError) as exc_info:
            client.request(openai_model, PAYLOAD)

        assert exc_info.value.attempts == 4
        assert exc_info.value.__cause__ is errors[-1]
        assert len(inner.calls) == 4
        # No wait after the final attempt
        assert delay.delays == [1.0, 2.0, 4.0]

    def test_default_budget_is_ten_attempts(self, make_client, limiter, delay, openai_model):
        inner = make_client([RuntimeError("timeout")] * 10)
        client = RateLimitedClient(inner, limiter, delay=delay)
        with pytest.raises(RetriesExhaustedError):
            client.request(openai_model, PAYLOAD)
        assert len(inner.calls) == 10
        assert delay.delays == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0, 30.0, 30.0, 30.0]

    def test_retry_config_overrides_arguments(
        self, make_client, limiter, delay, openai_model
    ):
        inner = make_client([RuntimeError("timeout")] * 3)
        client = RateLimitedClient(
            inner,
            limiter,
            delay=delay,
            max_retries=10,
            retry_config=RetryConfig(max_retries=3, base_delay=0.5, max_delay=1.0),
        )
        with pytest.raises(RetriesExhaustedError) as exc_info:
            client.request(openai_model, PAYLOAD)
        assert exc_info.value.attempts == 3
        assert delay.delays == [0.5, 1.0]


class TestNonRetryable:
    def test_estimate_above_token_capacity(self, make_client, clock, delay, anthropic_model):
        limiter = TokenBucketRateLimiter(clock=clock)
        inner = make_client([{"ok": True}])
        client = RateLimitedClient(
            inner, limiter, CountingEstimator(200_000), delay=delay
        )

        with pytest.raises(ConfigurationError, match="200000 tokens"):
            client.request(anthropic_model, PAYLOAD)

        assert inner.calls == []
        assert delay.count == 0
        assert limiter.check(anthropic_model, 1).remaining_requests == pytest.approx(99.0)

    def test_raised_immediately(self, make_client, limiter, delay, openai_model):
        error = ValueError("Invalid API key")
        inner = make_client([error, {"ok": True}])
        client = RateLimitedClient(inner, limiter, delay=delay)

        with pytest.raises(ValueError) as exc_info:
            client.request(openai_model, PAYLOAD)

        assert exc_info.value is error
        assert len(inner.calls) == 1
        assert delay.count == 0

    def test_retryable_raised_when_disabled(self, make_client, limiter, delay, openai_model):
        error = RuntimeError("Connection refused")
        client = RateLimitedClient(
            make_client([error]), limiter, delay=delay, enable_retries=False
        )
        with pytest.raises(RuntimeError) as exc_info:
            client.request(openai_model, PAYLOAD)
        assert exc_info.value is error
        assert delay.count == 0

    def test_custom_classifier(self, make_client, limiter, delay, openai_model):
        inner = make_client([KeyError("flaky"), {"ok": True}])
        client = RateLimitedClient(
            inner, limiter, delay=delay, classifier=lambda e: ErrorClass.RETRYABLE
        )
        assert client.request(openai_model, PAYLOAD) == {"ok": True}
        assert delay.delays == [1.0]


class TestMetricsAndLogging:
    def test_metrics(self, make_client, limiter, delay, openai_model):
        metrics = ClientMetrics()
        inner = make_client(
            [RateLimitExceededError(2.0), RuntimeError("timeout"), {"ok": True}]
        )
        client = RateLimitedClient(inner, limiter, delay=delay, metrics=metrics)
        client.request(openai_model, PAYLOAD)

        stats = metrics.get_stats()
        assert stats["attempts"] == 3
        assert stats["successes"] == 1
        assert stats["quota_denials"] == 1
        assert stats["retries"] == 2
        assert stats["total_delay_seconds"] == 4.0
        assert stats["by_provider"]["openai"]["attempts"] == 3
        assert stats["by_provider"]["openai"]["successes"] == 1
        assert stats["by_provider"]["openai"]["retries"] == 2

    def test_failure_outcomes(self, make_client, limiter, delay, openai_model):
        metrics = ClientMetrics()
        client = RateLimitedClient(
            make_client([ValueError("bad request")]), limiter, delay=delay, metrics=metrics
        )
        with pytest.raises(ValueError):
            client.request(openai_model, PAYLOAD)
        assert metrics.non_retryable_failures == 1

        client = RateLimitedClient(
            make_client([RuntimeError("timeout")] * 2),
            limiter,
            delay=delay,
            max_retries=2,
            metrics=metrics,
        )
        with pytest.raises(RetriesExhaustedError):
            client.request(openai_model, PAYLOAD)
        assert metrics.exhausted == 1

    def test_logs_failure_and_retry(self, make_client, limiter, delay, openai_model, caplog):
        inner = make_client([RuntimeError("Connection reset"), {"ok": True}])
        client = RateLimitedClient(inner, limiter, delay=delay)

        with caplog.at_level(logging.WARNING, logger="llm_ratelimit.client.rate_limited"):
            client.request(openai_model, PAYLOAD)

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(errors) == 1
        assert errors[0].exception_class == "RuntimeError"
        assert errors[0].attempt == 1
        assert len(warnings) == 1
        assert warnings[0].delay == 1.0

    def test_custom_logger(self, make_client, limiter, delay, openai_model, caplog):
        logger = logging.getLogger("test.custom_client")
        inner = make_client([RateLimitExceededError(0.5), {"ok": True}])
        client = RateLimitedClient(inner, limiter, delay=delay, logger=logger)

        with caplog.at_level(logging.WARNING, logger="test.custom_client"):
            client.request(openai_model, PAYLOAD)

        records = [r for r in caplog.records if r.name == "test.custom_client"]
        assert len(records) == 1
        assert records[0].retry_after == 0.5
