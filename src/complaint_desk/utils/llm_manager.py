"""LLM instance management.

This module builds chat model instances for the configured OpenAI-compatible
providers and caches them per provider/model pair.
"""

import logging
import os
from typing import Dict, Optional

from langchain_openai import ChatOpenAI

from complaint_desk.config import DEFAULT_LLM_PROVIDER, LLM_PROVIDERS, TEMPERATURE
from complaint_desk.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class LLMManager:
    """Manages active LLM instances."""

    def __init__(self, default_provider: str = DEFAULT_LLM_PROVIDER) -> None:
        self.default_provider = default_provider
        self.active_llms: Dict[str, ChatOpenAI] = {}
        logger.info("LLMManager initialized (default provider: %s)", default_provider)

    def _validate_provider(self, provider: str) -> None:
        if provider not in LLM_PROVIDERS:
            raise ConfigurationError(f"Unsupported provider: {provider}")

    def _get_env_api_key(self, provider: str) -> Optional[str]:
        """Return provider API key from environment if set."""
        env_key = LLM_PROVIDERS.get(provider, {}).get("env_key")
        return os.getenv(env_key) if env_key else None

    def has_api_key(self, provider: Optional[str] = None) -> bool:
        return bool(self._get_env_api_key(provider or self.default_provider))

    def get_llm(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> ChatOpenAI:
        """Get an LLM instance for the provider/model.

        Args:
            provider: Provider name; defaults to DEFAULT_LLM_PROVIDER.
            model: Model name; defaults to the provider's default model.

        Raises:
            ConfigurationError: If the provider is unknown or has no API key.
        """
        resolved_provider = provider or self.default_provider
        self._validate_provider(resolved_provider)
        provider_config = LLM_PROVIDERS[resolved_provider]
        resolved_model = model or provider_config["default_model"]

        cache_key = f"{resolved_provider}:{resolved_model}"
        cached = self.active_llms.get(cache_key)
        if cached:
            return cached

        api_key = self._get_env_api_key(resolved_provider)
        if not api_key:
            raise ConfigurationError(
                f"{provider_config['env_key']} must be set to use "
                f"{provider_config['display_name']}"
            )

        kwargs = {
            "model": resolved_model,
            "api_key": api_key,
            "temperature": TEMPERATURE,
        }
        base_url = provider_config["base_url"]
        if base_url:
            kwargs["base_url"] = base_url

        llm = ChatOpenAI(**kwargs)
        self.active_llms[cache_key] = llm
        return llm
