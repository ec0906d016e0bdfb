from issue_assistant.llm.llm_factory import LLMFactory, UnsupportedProviderError, MissingApiKeyError

__all__ = ["LLMFactory", "UnsupportedProviderError", "MissingApiKeyError"]
