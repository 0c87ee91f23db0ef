"""
OpenAI LLM Provider

Implements the LLMProvider interface with the chat completions API.
"""

import logging
from typing import Dict, List, Optional

from replydesk.core.settings import settings

from .base import LLMProvider, LLMConfig

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI GPT model provider."""

    PROVIDER_NAME = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"

    INPUT_PRICE_PER_1M = 0.15
    OUTPUT_PRICE_PER_1M = 0.60

    MODEL_PRICING = {
        "gpt-4o-mini": {"input": 0.15, "output": 0.60},
        "gpt-4o": {"input": 2.50, "output": 10.00},
        "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
    }

    def _init_client(self, api_key: Optional[str] = None, **kwargs) -> None:
        self._api_key = api_key or settings.openai_api_key
        self._client = None

        if self.model in self.MODEL_PRICING:
            self.INPUT_PRICE_PER_1M = self.MODEL_PRICING[self.model]["input"]
            self.OUTPUT_PRICE_PER_1M = self.MODEL_PRICING[self.model]["output"]

    def _configured(self) -> bool:
        return bool(self._api_key) and not self._api_key.startswith("your_")

    def _get_client(self, config: LLMConfig):
        """Lazy load OpenAI client."""
        if self._client is None:
            if not self._configured():
                raise ValueError("OpenAI API key not configured")

            from openai import OpenAI
            # Retries are handled by LLMProvider._call_with_retry
            self._client = OpenAI(
                api_key=self._api_key,
                timeout=config.timeout_seconds,
                max_retries=0,
            )

        return self._client

    def _call_api(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        client = self._get_client(config)

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        if config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = client.chat.completions.create(**kwargs)

        raw_text = (response.choices[0].message.content or "").strip()
        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0

        return raw_text, prompt_tokens, completion_tokens

    def is_available(self) -> bool:
        return self._configured()
