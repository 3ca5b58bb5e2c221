# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Token estimator registry.

Maps each provider to the estimator that understands its payloads and falls
back to a generic estimator for providers without a registration.
"""

import logging
from collections.abc import Mapping

from ..exceptions import ConfigurationError
from ..protocols.estimator import TokenEstimatorProtocol
from ..types.model import Model
from ..types.payload import Payload
from ..types.provider import Provider
from .anthropic import AnthropicTokenEstimator
from .gemini import GeminiTokenEstimator
from .generic import GenericTokenEstimator
from .openai import OpenAITokenEstimator

logger = logging.getLogger(__name__)


class TokenEstimatorRegistry:
    """
    Dispatches estimation by the model's provider.

    Example:
        >>> registry = TokenEstimatorRegistry.create_default()
        >>> registry.estimate(model, {"messages": [{"role": "user", "content": "Hi"}]})
        5
    """

    def __init__(
        self,
        estimators: Mapping[Provider, TokenEstimatorProtocol] | None = None,
        fallback: TokenEstimatorProtocol | None = None,
    ) -> None:
        """
        Args:
            estimators: Initial provider to estimator mapping
            fallback: Estimator used for unregistered providers.
                Defaults to GenericTokenEstimator.
        """
        self._estimators: dict[Provider, TokenEstimatorProtocol] = {}
        self._fallback = fallback if fallback is not None else GenericTokenEstimator()
        if not isinstance(self._fallback, TokenEstimatorProtocol):
            raise ConfigurationError(
                f"Fallback estimator {type(self._fallback).__name__} "
                "does not implement estimate()"
            )
        for provider, estimator in (estimators or {}).items():
            self.register(provider, estimator)

    @classmethod
    def create_default(cls) -> "TokenEstimatorRegistry":
        """Create a registry with the built-in estimators for every known provider."""
        registry = cls()
        registry.register(Provider.OPENAI, OpenAITokenEstimator())
        registry.register(Provider.ANTHROPIC, AnthropicTokenEstimator())
        registry.register(Provider.GEMINI, GeminiTokenEstimator())
        return registry

    def register(
        self, provider: Provider | str, estimator: TokenEstimatorProtocol
    ) -> None:
        """Register (or replace) the estimator for ``provider``."""
        if not isinstance(estimator, TokenEstimatorProtocol):
            raise ConfigurationError(
                f"Estimator {type(estimator).__name__} does not implement estimate()"
            )
        resolved = Provider.from_id(provider)
        self._estimators[resolved] = estimator
        logger.debug(
            f"Registered {type(estimator).__name__} for provider '{resolved.value}'"
        )

    def get_estimator_for_model(self, model: Model) -> TokenEstimatorProtocol:
        return self._estimators.get(model.provider, self._fallback)

    def has_estimator_for_model(self, model: Model) -> bool:
        return model.provider in self._estimators

    def registered_providers(self) -> list[Provider]:
        return list(self._estimators)

    def estimate(self, model: Model, payload: Payload) -> int:
        """Estimate tokens with the estimator registered for the model's provider."""
        return self.get_estimator_for_model(model).estimate(model, payload)


__all__ = ["TokenEstimatorRegistry"]
