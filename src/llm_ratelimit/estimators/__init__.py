# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Heuristic token estimators.

Available estimators:
- OpenAITokenEstimator: ``messages`` arrays and role keys
- AnthropicTokenEstimator: content blocks, ``messages`` and role keys
- GeminiTokenEstimator: ``contents[].parts[]``, ``systemInstruction`` and role keys
- GenericTokenEstimator: any string field, used for unregistered providers

TokenEstimatorRegistry dispatches by the model's provider.
"""

from .anthropic import AnthropicTokenEstimator
from .base import BaseTokenEstimator, EstimatorCoefficients
from .gemini import GeminiTokenEstimator
from .generic import GenericTokenEstimator
from .openai import OpenAITokenEstimator
from .registry import TokenEstimatorRegistry

__all__ = [
    "AnthropicTokenEstimator",
    "BaseTokenEstimator",
    "EstimatorCoefficients",
    "GeminiTokenEstimator",
    "GenericTokenEstimator",
    "OpenAITokenEstimator",
    "TokenEstimatorRegistry",
]
