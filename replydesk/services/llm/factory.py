"""
LLM Provider Factory

Creates the configured provider and keeps one shared instance per process.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Type

from replydesk.core.settings import settings

from .base import LLMProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMProviderType(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"


PROVIDER_REGISTRY: Dict[str, Type[LLMProvider]] = {
    LLMProviderType.OPENAI: OpenAIProvider,
}


def create_llm_provider(provider: Optional[str] = None, model: Optional[str] = None, **kwargs) -> LLMProvider:
    """Build a provider from explicit arguments or LLM_PROVIDER / LLM_MODEL."""
    provider_type = LLMProviderType(provider or settings.llm_provider)
    instance = PROVIDER_REGISTRY[provider_type](model=model or settings.llm_model, **kwargs)
    logger.info(
        f"[llm] provider={provider_type.value} model={instance.model} "
        f"available={instance.is_available()}"
    )
    return instance


_provider_instance: Optional[LLMProvider] = None


def get_llm_provider() -> LLMProvider:
    """Get or create the process-wide provider."""
    global _provider_instance
    if _provider_instance is None:
        _provider_instance = create_llm_provider()
    return _provider_instance


def reset_llm_provider() -> None:
    """Drop the shared instance (useful for testing)."""
    global _provider_instance
    _provider_instance = None
