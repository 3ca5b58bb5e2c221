# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base token estimator.

Estimators turn a request payload into an approximate token count without
calling a vendor tokenizer. Each provider subclass only knows how to pull text
out of its own payload shape and which coefficients to apply; the scoring
itself is shared.

Scoring:
    1. Extract a single text string from the payload
    2. Count and strip cost-inflating patterns (code fences, URLs, JSON
       punctuation), tallying their extra weight
    3. Blend three independent estimates (characters, words, sentences)
       with weights 0.4 / 0.4 / 0.2
    4. Add the tally, apply the provider efficiency factor, round up
"""

import logging
import math
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from ..types.model import Model
from ..types.payload import Payload
from ..types.provider import Provider

logger = logging.getLogger(__name__)

# Ordered: fenced blocks and URLs are matched before their punctuation is stripped
SPECIAL_TOKEN_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"```[\s\S]*?```"), 50),  # fenced code blocks
    (re.compile(r"https?://\S+"), 5),  # URLs
    (re.compile(r"[{}\[\]:,]"), 1),  # JSON structure
)

CHAR_WEIGHT = 0.4
WORD_WEIGHT = 0.4
SENTENCE_WEIGHT = 0.2

ROLE_KEYS = ("user", "assistant", "system")

# Fields the generic extractor reads before any other
PRIORITY_FIELDS = ("content", "text", "message", "prompt", "system", "user", "assistant")

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"[^\W\d_]+(?:['-][^\W\d_]+)*")
_SENTENCE_RE = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class EstimatorCoefficients:
    """
    Provider-specific tuning for the shared scoring algorithm.

    Attributes:
        char_divisor: Characters per token
        word_multiplier: Tokens per word
        sentence_tokens: Tokens per sentence
        efficiency_factor: Final multiplier; above 1.0 adds a safety buffer,
            below 1.0 reflects a more efficient vendor tokenizer
    """

    char_divisor: float = 4.0
    word_multiplier: float = 0.75
    sentence_tokens: int = 20
    efficiency_factor: float = 1.1

    def __post_init__(self) -> None:
        if self.char_divisor <= 0:
            raise ValueError("char_divisor must be positive")
        if self.word_multiplier <= 0:
            raise ValueError("word_multiplier must be positive")
        if self.sentence_tokens <= 0:
            raise ValueError("sentence_tokens must be positive")
        if self.efficiency_factor <= 0:
            raise ValueError("efficiency_factor must be positive")


def join_text(parts: Iterable[str]) -> str:
    """Join extracted fragments with single spaces, dropping the outer padding."""
    return " ".join(parts).strip()


def role_text(payload: Mapping[str, Any]) -> list[str]:
    """Collect string values of the flat ``user``/``assistant``/``system`` keys."""
    return [payload[role] for role in ROLE_KEYS if isinstance(payload.get(role), str)]


def message_contents(messages: Any) -> list[str]:
    """Collect string ``content`` fields from a ``messages`` array."""
    if not isinstance(messages, list):
        return []
    return [
        message["content"]
        for message in messages
        if isinstance(message, Mapping) and isinstance(message.get("content"), str)
    ]


def _mapping_strings(payload: Mapping[Any, Any]) -> list[str]:
    """String fields of a mapping, priority fields first, each field once."""
    keys = [key for key in PRIORITY_FIELDS if key in payload]
    keys.extend(key for key in payload if key not in PRIORITY_FIELDS)

    parts: list[str] = []
    for key in keys:
        value = payload[key]
        if isinstance(value, str):
            parts.append(value)
        elif isinstance(value, list):
            parts.extend(item for item in value if isinstance(item, str))
    return parts


def extract_generic_text(payload: Payload) -> str:
    """
    Extract text from an arbitrary payload.

    Reads the fields in PRIORITY_FIELDS first, then every other string-valued
    top-level field, plus bare string items of top-level lists. Each field is
    read once. List payloads contribute bare strings and the string fields of
    mapping items.
    """
    if isinstance(payload, str):
        return payload.strip()

    parts: list[str] = []
    if isinstance(payload, Mapping):
        parts = _mapping_strings(payload)
    elif isinstance(payload, Sequence):
        for item in payload:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, Mapping):
                parts.extend(_mapping_strings(item))
    return join_text(parts)


class BaseTokenEstimator(ABC):
    """
    Shared scoring for heuristic token estimators.

    Subclasses implement ``extract_text`` for their provider payload shape
    and may override ``coefficients``. ``estimate`` never raises for unexpected
    payload shapes: if provider-specific extraction finds nothing, the generic
    extractor is tried before giving up with the minimum estimate of 1.
    """

    provider: ClassVar[Provider] = Provider.UNKNOWN
    coefficients: ClassVar[EstimatorCoefficients] = EstimatorCoefficients()

    def estimate(self, model: Model, payload: Payload) -> int:
        """
        Estimate tokens for ``payload``.

        Args:
            model: Model the payload is destined for
            payload: Raw text or a provider-shaped structure

        Returns:
            Estimated token count, always >= 1
        """
        if isinstance(payload, str):
            return self.estimate_text(payload)

        text = ""
        if isinstance(payload, Mapping):
            text = self.extract_text(payload)
        if not text:
            text = extract_generic_text(payload)
            if text:
                logger.debug(
                    f"Payload for model '{model.id}' did not match the "
                    f"{self.provider.value} shape, using generic extraction"
                )
        return self.estimate_text(text)

    @abstractmethod
    def extract_text(self, payload: Mapping[str, Any]) -> str:
        """
        Extract text from a provider-specific payload.

        Args:
            payload: Provider-shaped request body

        Returns:
            Flattened text, or an empty string if nothing was recognized
        """
        pass

    def estimate_text(self, text: str) -> int:
        """Score already-extracted text."""
        if not text:
            return 1

        special_tokens = 0
        clean_text = text
        for pattern, weight in SPECIAL_TOKEN_PATTERNS:
            clean_text, matches = pattern.subn(" ", clean_text)
            special_tokens += matches * weight

        clean_text = _WHITESPACE_RE.sub(" ", clean_text).strip()
        if not clean_text:
            return max(1, special_tokens)

        c = self.coefficients
        char_count = len(clean_text)
        word_count = len(_WORD_RE.findall(clean_text))
        sentence_count = max(1, len(_SENTENCE_RE.findall(clean_text)))

        tokens_by_char = char_count / c.char_divisor
        tokens_by_word = word_count * c.word_multiplier
        tokens_by_sentence = sentence_count * c.sentence_tokens

        base_estimate = (
            tokens_by_char * CHAR_WEIGHT
            + tokens_by_word * WORD_WEIGHT
            + tokens_by_sentence * SENTENCE_WEIGHT
        )
        total = (base_estimate + special_tokens) * c.efficiency_factor
        return max(1, math.ceil(total))


__all__ = [
    "PRIORITY_FIELDS",
    "SPECIAL_TOKEN_PATTERNS",
    "BaseTokenEstimator",
    "EstimatorCoefficients",
    "extract_generic_text",
    "join_text",
    "message_contents",
    "role_text",
]
