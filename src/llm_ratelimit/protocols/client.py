# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for request executors."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from ..types.model import Model
from ..types.payload import Payload
from ..types.provider import Provider


@runtime_checkable
class ClientProtocol(Protocol):
    """
    Minimal protocol for vendor API clients.

    Payload shaping, HTTP transport and result conversion stay in the
    implementing client. The library only needs to call it and to know which
    models it serves.
    """

    @property
    def provider(self) -> Provider:
        """Provider served by this client."""
        ...

    def supports(self, model: Model) -> bool:
        """Whether this client can execute requests for ``model``."""
        ...

    def request(
        self,
        model: Model,
        payload: Payload,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Execute a request and return the provider result.

        May raise any exception. ``RateLimitExceededError`` is treated as a
        quota event by the rate limited client.
        """
        ...
