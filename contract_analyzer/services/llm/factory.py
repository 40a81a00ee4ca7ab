"""
LLM Provider Factory
Creates the configured chat provider for contract analysis
"""

from typing import Optional

from ...config.settings import settings
from ...utils.errors import ConfigurationError
from .base import BaseLLMProvider
from .providers.openai_ import OpenAIProvider


class LLMFactory:
    """Factory for creating LLM providers"""

    _providers = {
        "openai": OpenAIProvider,
    }

    @classmethod
    def create_provider(cls, provider: Optional[str] = None, **kwargs) -> BaseLLMProvider:
        """
        Create LLM provider instance

        Args:
            provider: Provider name, defaults to settings.llm_provider
            **kwargs: Additional provider parameters

        Returns:
            LLM provider instance

        Raises:
            ConfigurationError: unknown provider or missing API key
        """
        provider_name = (provider or settings.llm_provider).lower()

        if provider_name not in cls._providers:
            raise ConfigurationError(
                f"Unsupported provider: {provider_name}. Available: {list(cls._providers.keys())}"
            )

        api_key = kwargs.pop("api_key", None) or cls._api_key(provider_name)
        if not api_key:
            raise ConfigurationError(f"API key not found for provider: {provider_name}")

        return cls._providers[provider_name](api_key=api_key, **kwargs)

    @staticmethod
    def _api_key(provider: str) -> Optional[str]:
        if provider == "openai":
            return settings.openai_api_key
        return None
