# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for token estimation."""

from typing import Protocol, runtime_checkable

from ..types.model import Model
from ..types.payload import Payload


@runtime_checkable
class TokenEstimatorProtocol(Protocol):
    """
    Protocol for heuristic token estimators.

    Implementations must never raise for unexpected payload shapes and must
    always return at least 1.
    """

    def estimate(self, model: Model, payload: Payload) -> int:
        """Estimate the number of tokens ``payload`` will consume."""
        ...
