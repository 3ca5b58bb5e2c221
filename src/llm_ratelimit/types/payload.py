# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Request payload shapes accepted by estimators and executors."""

from collections.abc import Mapping, Sequence
from typing import Any, Union

# Raw text, a provider-shaped mapping, or (for the generic estimator) a list
Payload = Union[str, Mapping[str, Any], Sequence[Any]]

__all__ = ["Payload"]
