"""
LLM Provider Base Interface

Abstract base class defining the contract for LLM providers. ``generate``
never raises: failures come back as an ``LLMResponse`` with
``success=False`` and ``error`` set, so callers decide how to degrade.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional
import json
import logging
import re
import time

from replydesk.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider."""
    success: bool
    content: Dict[str, Any]  # Parsed JSON response
    raw_response: str

    # Metrics
    latency_ms: int
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    estimated_cost_usd: float

    # Provider info
    provider: str
    model: str

    error: Optional[str] = None


@dataclass
class LLMConfig:
    """Configuration for LLM calls."""
    temperature: float = 0.2
    max_tokens: int = 1500
    json_mode: bool = True
    timeout_seconds: int = settings.llm_timeout_seconds
    max_retries: int = settings.llm_max_retries


# Substrings of provider errors worth another attempt
RETRYABLE_MARKERS = ("rate limit", "429", "quota", "timeout", "timed out", "503", "502", "connection")


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    PROVIDER_NAME: str = "base"
    DEFAULT_MODEL: str = "unknown"

    # Pricing per 1M tokens (subclasses override)
    INPUT_PRICE_PER_1M: float = 0.0
    OUTPUT_PRICE_PER_1M: float = 0.0

    # First backoff delay in seconds; doubles per attempt
    RETRY_BASE_DELAY: float = 0.6

    def __init__(self, model: Optional[str] = None, **kwargs):
        self.model = model or self.DEFAULT_MODEL
        self._init_client(**kwargs)

    @abstractmethod
    def _init_client(self, **kwargs) -> None:
        """Initialize the provider's client. Implemented by subclasses."""

    @abstractmethod
    def _call_api(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        """Make the actual API call.

        Returns:
            Tuple of (raw_response_text, prompt_tokens, completion_tokens)
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is properly configured and available."""

    def generate(
        self,
        system_prompt: str,
        user_content: str,
        config: Optional[LLMConfig] = None
    ) -> LLMResponse:
        """Send one system + user exchange and parse the JSON reply.

        Handles JSON parsing and metrics logging. Transient errors are
        retried only when ``config.max_retries`` is above zero.
        """
        config = config or LLMConfig()
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]

        start_time = time.time()

        try:
            raw_response, prompt_tokens, completion_tokens = self._call_with_retry(
                messages, config
            )
            content = self._parse_json(raw_response)
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error(f"[llm] provider={self.PROVIDER_NAME} error={str(e)}")
            return LLMResponse(
                success=False,
                content={},
                raw_response="",
                latency_ms=latency_ms,
                prompt_tokens=0,
                completion_tokens=0,
                total_tokens=0,
                estimated_cost_usd=0.0,
                provider=self.PROVIDER_NAME,
                model=self.model,
                error=str(e),
            )

        latency_ms = int((time.time() - start_time) * 1000)
        total_tokens = prompt_tokens + completion_tokens
        cost_usd = self._calculate_cost(prompt_tokens, completion_tokens)

        logger.info(
            f"[llm] provider={self.PROVIDER_NAME} model={self.model} "
            f"latency_ms={latency_ms} tokens={total_tokens} "
            f"(prompt={prompt_tokens}, completion={completion_tokens}) "
            f"cost_usd={cost_usd:.6f}"
        )

        return LLMResponse(
            success=True,
            content=content,
            raw_response=raw_response,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            estimated_cost_usd=cost_usd,
            provider=self.PROVIDER_NAME,
            model=self.model,
        )

    def _call_with_retry(
        self,
        messages: List[Dict[str, str]],
        config: LLMConfig
    ) -> tuple[str, int, int]:
        """Call API once, plus up to ``max_retries`` backoff retries on transient errors."""
        attempts = 1 + max(0, config.max_retries)
        delay = self.RETRY_BASE_DELAY

        for attempt in range(attempts):
            try:
                if attempt > 0:
                    logger.info(f"[llm] retry attempt {attempt + 1}/{attempts}")
                return self._call_api(messages, config)
            except Exception as e:
                error_msg = str(e).lower()
                retryable = any(marker in error_msg for marker in RETRYABLE_MARKERS)
                if not retryable or attempt == attempts - 1:
                    raise
                time.sleep(delay)
                delay *= 2

        raise RuntimeError("LLM call failed after retries")

    def _calculate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Calculate estimated cost in USD."""
        return (
            prompt_tokens * self.INPUT_PRICE_PER_1M +
            completion_tokens * self.OUTPUT_PRICE_PER_1M
        ) / 1_000_000

    def _parse_json(self, content: str) -> Dict[str, Any]:
        """Parse a JSON object from the model's reply with fallback strategies."""
        if not content:
            raise ValueError("Empty response from LLM")

        text = content.strip()

        # Remove markdown code fences if present
        if text.startswith("```"):
            text = re.sub(r"^```[a-zA-Z0-9_-]*\n?", "", text)
            text = re.sub(r"\n?```\s*$", "", text)

        candidates = [text]
        start, end = text.find("{"), text.rfind("}")
        if start != -1 and end > start:
            candidates.append(text[start:end + 1])
        candidates.append(re.sub(r",\s*([}\]])", r"\1", candidates[-1]))

        for candidate in candidates:
            try:
                result = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if not isinstance(result, dict):
                raise ValueError(f"Expected a JSON object from LLM, got {type(result).__name__}")
            return result

        truncated = text[:300] + "..." if len(text) > 300 else text
        raise ValueError(f"Could not parse JSON from LLM response: {truncated}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
