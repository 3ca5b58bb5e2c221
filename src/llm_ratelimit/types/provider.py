# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Provider identity for LLM vendors.

The set of providers is closed. Anything the library does not know about is
mapped to ``Provider.UNKNOWN`` so that lookups never fall back to free-form
string keys.
"""

from enum import Enum


class Provider(Enum):
    """
    LLM vendors understood by the library.

    - OPENAI: OpenAI chat/completions style payloads
    - ANTHROPIC: Anthropic messages API with content blocks
    - GEMINI: Google Gemini ``contents``/``parts`` payloads
    - UNKNOWN: Fallback for any other provider id
    """

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    UNKNOWN = "unknown"

    @classmethod
    def from_id(cls, provider_id: "str | Provider") -> "Provider":
        """Resolve a provider id, returning UNKNOWN for unrecognized ids."""
        if isinstance(provider_id, Provider):
            return provider_id
        try:
            return cls(provider_id.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def default_requests_per_minute(self) -> int:
        return _DEFAULT_LIMITS[self][0]

    @property
    def default_tokens_per_minute(self) -> int:
        return _DEFAULT_LIMITS[self][1]


_DISPLAY_NAMES = {
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
    Provider.GEMINI: "Google Gemini",
    Provider.UNKNOWN: "Unknown",
}

# (requests per minute, tokens per minute)
_DEFAULT_LIMITS = {
    Provider.OPENAI: (180, 450_000),  # 90% of 200 RPM / 500K TPM
    Provider.ANTHROPIC: (100, 100_000),
    Provider.GEMINI: (1_000, 1_000_000),  # Tier 1
    Provider.UNKNOWN: (60, 50_000),
}

KNOWN_PROVIDERS = frozenset({Provider.OPENAI, Provider.ANTHROPIC, Provider.GEMINI})

__all__ = ["KNOWN_PROVIDERS", "Provider"]
