# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Token estimator for OpenAI chat payloads."""

from collections.abc import Mapping
from typing import Any, ClassVar

from ..types.provider import Provider
from .base import BaseTokenEstimator, join_text, message_contents, role_text


class OpenAITokenEstimator(BaseTokenEstimator):
    """
    Estimator for ``{"messages": [{"role": ..., "content": ...}], ...}`` payloads.

    Uses the baseline coefficients (about 4 characters per token with a 10%
    safety buffer).
    """

    provider: ClassVar[Provider] = Provider.OPENAI

    def extract_text(self, payload: Mapping[str, Any]) -> str:
        parts = message_contents(payload.get("messages"))
        parts.extend(role_text(payload))
        return join_text(parts)
