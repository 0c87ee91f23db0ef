"""
LLM Service Module

Provider abstraction over the external language model.

Configuration:
- LLM_PROVIDER: provider name (only 'openai' today)
- LLM_MODEL: model to use (optional, provider default otherwise)
- OPENAI_API_KEY: OpenAI API key
- LLM_TIMEOUT_SECONDS / LLM_MAX_RETRIES: transport timeout and opt-in retries (default 0)

Usage:
    from replydesk.services.llm import get_llm_provider

    provider = get_llm_provider()
    response = provider.generate(system_prompt, user_content)
    if response.success:
        print(response.content)  # Parsed JSON
    else:
        print(f"Error: {response.error}")
"""

from .base import LLMProvider, LLMResponse, LLMConfig
from .openai_provider import OpenAIProvider
from .factory import (
    LLMProviderType,
    PROVIDER_REGISTRY,
    create_llm_provider,
    get_llm_provider,
    reset_llm_provider,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "OpenAIProvider",
    "LLMProviderType",
    "PROVIDER_REGISTRY",
    "create_llm_provider",
    "get_llm_provider",
    "reset_llm_provider",
]
