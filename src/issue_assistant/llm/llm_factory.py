import os
import logging
from typing import Optional
from pydantic import SecretStr
from langchain_openai import ChatOpenAI
from langchain_anthropic import ChatAnthropic
from langchain_core.utils.utils import secret_from_env

from issue_assistant.config import AssistantConfig
from issue_assistant.model.pipeline import InvocationSettings

logger = logging.getLogger(__name__)

# Supported AI providers with their identifiers
SUPPORTED_PROVIDERS = {
    "openrouter": ["openrouter", "open-router"],
    "openai": ["openai"],
    "anthropic": ["anthropic"],
}


class UnsupportedProviderError(Exception):
    """Raised when an unsupported provider is requested."""
    pass


class MissingApiKeyError(Exception):
    """Raised when a model is requested but no API key is configured."""
    pass


class ChatOpenRouter(ChatOpenAI):
    """
    Small wrapper to support OpenRouter-style configuration via api_key.
    """
    api_key: Optional[SecretStr] = SecretStr(
        secret_from_env("OPENROUTER_API_KEY", default=None) or ""
    )

    @property
    def lc_secrets(self) -> dict[str, str]:
        return {"api_key": "OPENROUTER_API_KEY"}

    def __init__(self,
                 api_key: Optional[str] = None,
                 **kwargs):
        api_key = api_key or os.environ.get("OPENROUTER_API_KEY")
        super().__init__(
            base_url="https://openrouter.ai/api/v1",
            api_key=api_key,
            **kwargs
        )


class LLMFactory:
    """
    Factory for creating chat models for the configured AI provider.

    One model instance is created per invocation so each pipeline step gets
    its own temperature and output budget.
    """

    def __init__(self, config: AssistantConfig):
        self.config = config

    def __call__(self, settings: InvocationSettings):
        if not self.config.has_api_key:
            raise MissingApiKeyError(
                "AI API key is not configured. Set AI_API_KEY (or OPENAI_API_KEY)."
            )
        return self.create_llm(
            self.config.ai_model,
            self.config.ai_provider,
            self.config.ai_api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_output_tokens,
        )

    @staticmethod
    def get_supported_providers() -> list:
        return list(SUPPORTED_PROVIDERS)

    @staticmethod
    def _normalize_provider(ai_provider: str) -> str:
        provider_lower = (ai_provider or "").strip().lower()
        for provider, aliases in SUPPORTED_PROVIDERS.items():
            if provider_lower in aliases:
                return provider
        return provider_lower

    @staticmethod
    def create_llm(ai_model: str, ai_provider: str, ai_api_key: str,
                   temperature: float = 0.0, max_tokens: Optional[int] = None):
        """
        Create LLM instance.

        Raises:
            UnsupportedProviderError: If the provider is not supported

        Returns:
            LangChain chat model instance
        """
        provider = LLMFactory._normalize_provider(ai_provider)
        logger.debug(f"Creating LLM instance: provider={provider}, model={ai_model}, "
                     f"temperature={temperature}, max_tokens={max_tokens}")

        if provider == "openrouter":
            extra_headers = {
                "X-Title": "GitHub Issue Assistant"
            }
            return ChatOpenRouter(
                api_key=ai_api_key,
                model_name=ai_model,
                temperature=temperature,
                max_tokens=max_tokens,
                default_headers=extra_headers
            )

        if provider == "openai":
            return ChatOpenAI(
                api_key=ai_api_key,
                model=ai_model,
                temperature=temperature,
                max_tokens=max_tokens
            )

        if provider == "anthropic":
            return ChatAnthropic(
                api_key=ai_api_key,
                model=ai_model,
                temperature=temperature,
                max_tokens=max_tokens or 1024
            )

        supported = ", ".join(LLMFactory.get_supported_providers())
        error_msg = f"Unsupported AI provider: '{ai_provider}'. Supported providers: {supported}"
        logger.error(error_msg)
        raise UnsupportedProviderError(error_msg)
