from shopsense.services.llm.base import LLMProvider, LLMProviderError, LLMResponse, prompt_messages
from shopsense.services.llm.openai_provider import OpenAIProvider

__all__ = ["LLMProvider", "LLMProviderError", "LLMResponse", "OpenAIProvider", "prompt_messages"]
