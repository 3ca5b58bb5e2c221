# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Fallback token estimator for providers without a dedicated one."""

from collections.abc import Mapping
from typing import Any

from .base import BaseTokenEstimator, extract_generic_text


class GenericTokenEstimator(BaseTokenEstimator):
    """Concatenates every string field it can find and scores it with the baseline coefficients."""

    def extract_text(self, payload: Mapping[str, Any]) -> str:
        return extract_generic_text(payload)
