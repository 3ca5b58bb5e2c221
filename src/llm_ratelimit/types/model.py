# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Model descriptor consumed by the estimators, limiters and clients.

The descriptor is owned by the caller. The library only reads it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .provider import Provider


class Model(BaseModel):
    """
    Immutable description of a vendor model.

    Attributes:
        id: Vendor model identifier (e.g. 'gpt-4o-mini', 'claude-sonnet-4')
        provider: Provider that serves the model. Plain strings are accepted
            and resolved through ``Provider.from_id``.
        max_tokens: Maximum context tokens the model accepts
        options: Default request options forwarded to executors
        display_name: Optional human-readable name
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    provider: Provider
    max_tokens: int = Field(gt=0)
    options: dict[str, Any] = Field(default_factory=dict)
    display_name: str | None = None

    @field_validator("provider", mode="before")
    @classmethod
    def _coerce_provider(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Provider.from_id(value)
        return value

    @property
    def provider_id(self) -> str:
        """The provider's string identity (e.g. 'openai')."""
        return self.provider.value

    def get_display_name(self) -> str:
        return self.display_name or self.id


__all__ = ["Model"]
