"""Shared fixtures for the llm_ratelimit test suite."""

import pytest

from llm_ratelimit.types import Model, Provider


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedClient:
    """Client that replays a script of results and exceptions."""

    def __init__(self, script=None, provider=Provider.OPENAI):
        self.script = list(script or [])
        self.calls = []
        self._provider = provider

    @property
    def provider(self):
        return self._provider

    def supports(self, model):
        return model.provider is self._provider

    def request(self, model, payload, options=None):
        self.calls.append((model, payload, options))
        outcome = self.script.pop(0) if self.script else {"ok": True}
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def openai_model():
    return Model(id="gpt-4o-mini", provider=Provider.OPENAI, max_tokens=128_000)


@pytest.fixture
def anthropic_model():
    return Model(id="claude-sonnet-4", provider="anthropic", max_tokens=200_000)


@pytest.fixture
def gemini_model():
    return Model(id="gemini-2.0-flash", provider=Provider.GEMINI, max_tokens=1_000_000)


@pytest.fixture
def unknown_model():
    return Model(id="mistral-large", provider="mistral", max_tokens=32_000)


@pytest.fixture
def make_client():
    """Factory for ScriptedClient instances."""
    return ScriptedClient
