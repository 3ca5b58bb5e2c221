# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Token estimator for Google Gemini payloads."""

from collections.abc import Mapping
from typing import Any, ClassVar

from ..types.provider import Provider
from .base import BaseTokenEstimator, EstimatorCoefficients, join_text, role_text


class GeminiTokenEstimator(BaseTokenEstimator):
    """
    Estimator for ``{"contents": [{"parts": [{"text": ...}]}]}`` payloads.

    A string ``systemInstruction`` and flat role keys are included as well.
    """

    provider: ClassVar[Provider] = Provider.GEMINI
    coefficients: ClassVar[EstimatorCoefficients] = EstimatorCoefficients(
        char_divisor=4.1,
        word_multiplier=0.74,
        sentence_tokens=19,
        efficiency_factor=0.97,
    )

    def extract_text(self, payload: Mapping[str, Any]) -> str:
        parts: list[str] = []

        contents = payload.get("contents")
        if isinstance(contents, list):
            for content in contents:
                if not isinstance(content, Mapping):
                    continue
                content_parts = content.get("parts")
                if not isinstance(content_parts, list):
                    continue
                parts.extend(
                    part["text"]
                    for part in content_parts
                    if isinstance(part, Mapping) and isinstance(part.get("text"), str)
                )

        system_instruction = payload.get("systemInstruction")
        if isinstance(system_instruction, str):
            parts.append(system_instruction)

        parts.extend(role_text(payload))
        return join_text(parts)
