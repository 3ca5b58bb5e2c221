# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Token estimator for Anthropic messages payloads."""

from collections.abc import Mapping
from typing import Any, ClassVar

from ..types.provider import Provider
from .base import (
    BaseTokenEstimator,
    EstimatorCoefficients,
    join_text,
    message_contents,
    role_text,
)


class AnthropicTokenEstimator(BaseTokenEstimator):
    """
    Estimator for Anthropic payloads.

    Understands ``content`` as either a string or a list of content blocks
    (only ``text`` blocks count; images and tool blocks are skipped), plus
    ``messages`` arrays and flat role keys.
    """

    provider: ClassVar[Provider] = Provider.ANTHROPIC
    coefficients: ClassVar[EstimatorCoefficients] = EstimatorCoefficients(
        char_divisor=4.2,
        word_multiplier=0.73,
        sentence_tokens=19,
        efficiency_factor=0.95,
    )

    def extract_text(self, payload: Mapping[str, Any]) -> str:
        parts: list[str] = []

        content = payload.get("content")
        if isinstance(content, list):
            parts.extend(
                block["text"]
                for block in content
                if isinstance(block, Mapping) and isinstance(block.get("text"), str)
            )
        elif isinstance(content, str):
            parts.append(content)

        parts.extend(message_contents(payload.get("messages")))
        parts.extend(role_text(payload))
        return join_text(parts)
