"""AI gateway over the configured LLM provider.

Four operations, each returning an ``AIResult``. A provider error, an
unparseable reply or a payload of the wrong shape never escapes: the result
comes back ``degraded`` with a documented default payload and the cause.
Confidence values are clamped to [0, 1] here and nowhere else.
"""
import json
import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from replydesk.schemas.ai import (
    AIResult,
    Classification,
    FeedbackRecord,
    InquiryCategory,
    Priority,
    ResponseGeneration,
    SentimentAnalysis,
    TemplateImprovement,
)
from replydesk.schemas.template import Template
from replydesk.services.llm import LLMConfig, LLMProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Used when a successful reply omits its confidence
MISSING_CONFIDENCE = 0.5

CLASSIFY_SYSTEM = (
    "You triage customer inquiries for a freelance business. "
    "Classify each inquiry so routine replies can be automated."
)
GENERATE_SYSTEM = (
    "You help a freelancer write professional replies to client inquiries, "
    "starting from one of their saved templates."
)
SENTIMENT_SYSTEM = (
    "You rate the sentiment of customer messages. Reply with JSON "
    '{"rating": <1-5 stars>, "confidence": <0.0-1.0>}.'
)
IMPROVE_SYSTEM = (
    "You are a copywriter for freelance business communications. "
    "Rewrite reply templates using their performance history."
)


def clamp_confidence(value: Any, missing: float = MISSING_CONFIDENCE) -> float:
    """Clamp a model-reported confidence into [0, 1]."""
    if value is None:
        return missing
    if isinstance(value, bool):
        raise ValueError("confidence must be a number")
    value = float(value)
    # NaN is no confidence at all
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def round_rating(value: Any) -> int:
    """Round half-up and clamp into the 1-5 star range."""
    if value is None:
        return 3
    if isinstance(value, bool):
        raise ValueError("rating must be a number")
    return max(1, min(5, math.floor(float(value) + 0.5)))


def _coerce_category(value: Any) -> InquiryCategory:
    try:
        return InquiryCategory(str(value).lower())
    except ValueError:
        return InquiryCategory.general


def _coerce_priority(value: Any) -> Priority:
    try:
        return Priority(str(value).lower())
    except ValueError:
        return Priority.normal


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return [str(item) for item in value]


def summarize_feedback(history: Sequence[FeedbackRecord]) -> Dict[str, float]:
    """Aggregate a template's usage history for the improvement prompt."""
    total = len(history)
    ratings = [h.customer_feedback for h in history if h.customer_feedback]
    return {
        "success_rate": (sum(1 for h in history if h.success) / total) if total else 0.0,
        "average_rating": (sum(ratings) / len(ratings)) if ratings else 0.0,
        "total_usage": total,
    }


class AIGateway:
    """Business-level AI operations on top of an ``LLMProvider``."""

    def __init__(self, provider: LLMProvider, config: Optional[LLMConfig] = None):
        self.provider = provider
        self.config = config

    def _run(
        self,
        operation: str,
        system_prompt: str,
        user_content: str,
        build: Callable[[Dict[str, Any]], T],
        fallback: Callable[[], T],
    ) -> AIResult[T]:
        try:
            response = self.provider.generate(system_prompt, user_content, self.config)
            if not response.success:
                raise RuntimeError(response.error or "provider call failed")
            payload = build(response.content)
        except Exception as e:
            logger.warning(f"[ai] {operation} degraded: {e}")
            return AIResult(status="degraded", payload=fallback(), cause=str(e))
        return AIResult(status="ok", payload=payload)

    def classify_inquiry(
        self,
        subject: Optional[str],
        content: str,
        templates: Sequence[Template],
    ) -> AIResult[Classification]:
        template_lines = "\n".join(
            f"ID: {t.id}, Name: {t.name}, Category: {t.category}" for t in templates
        ) or "(none)"
        prompt = (
            "Classify the customer inquiry below and answer with a JSON object:\n"
            "{\n"
            '  "category": "project|pricing|availability|support|general",\n'
            '  "priority": "low|normal|high|urgent",\n'
            '  "intent": "one sentence on what the customer wants",\n'
            '  "confidence": 0.0-1.0,\n'
            '  "requiredVariables": ["details needed to reply"],\n'
            '  "suggestedTemplateId": "ID of the best matching template, or null"\n'
            "}\n\n"
            f"Templates:\n{template_lines}\n\n"
            f"Subject: {subject or 'No subject'}\n"
            f"Content: {content}\n\n"
            "Words like 'urgent', 'ASAP' or a close deadline raise the priority."
        )

        def build(data: Dict[str, Any]) -> Classification:
            return Classification(
                category=_coerce_category(data.get("category") or "general"),
                priority=_coerce_priority(data.get("priority") or "normal"),
                intent=str(data.get("intent") or "General inquiry"),
                confidence=clamp_confidence(data.get("confidence")),
                required_variables=_string_list(data.get("requiredVariables")),
                suggested_template_id=(
                    str(data["suggestedTemplateId"]) if data.get("suggestedTemplateId") else None
                ),
            )

        def fallback() -> Classification:
            return Classification(intent="Unable to classify inquiry", confidence=0.0)

        return self._run("classify_inquiry", CLASSIFY_SYSTEM, prompt, build, fallback)

    def generate_response(
        self,
        inquiry_content: str,
        template_content: str,
        variables: Optional[Dict[str, str]] = None,
    ) -> AIResult[ResponseGeneration]:
        prompt = (
            "Write a reply to the customer inquiry, adapting the template.\n\n"
            f"Template: {template_content}\n\n"
            f"Inquiry: {inquiry_content}\n\n"
            f"Known variables: {json.dumps(variables or {})}\n\n"
            "Fill template variables from the inquiry where you can and keep the "
            "tone professional and friendly. Answer with JSON: "
            '{"content": "the reply", "confidence": 0.0-1.0, "variables": {"name": "value"}}'
        )

        def build(data: Dict[str, Any]) -> ResponseGeneration:
            extracted = data.get("variables") or {}
            if not isinstance(extracted, dict):
                raise ValueError(f"expected variables object, got {type(extracted).__name__}")
            return ResponseGeneration(
                content=str(data.get("content") or template_content),
                confidence=clamp_confidence(data.get("confidence")),
                variables={str(k): str(v) for k, v in extracted.items()},
            )

        def fallback() -> ResponseGeneration:
            return ResponseGeneration(content=template_content, confidence=0.0, variables={})

        return self._run("generate_response", GENERATE_SYSTEM, prompt, build, fallback)

    def analyze_sentiment(self, text: str) -> AIResult[SentimentAnalysis]:
        def build(data: Dict[str, Any]) -> SentimentAnalysis:
            return SentimentAnalysis(
                rating=round_rating(data.get("rating")),
                confidence=clamp_confidence(data.get("confidence")),
            )

        def fallback() -> SentimentAnalysis:
            return SentimentAnalysis(rating=3, confidence=0.0)

        return self._run("analyze_sentiment", SENTIMENT_SYSTEM, text, build, fallback)

    def improve_template(
        self,
        template_content: str,
        history: Sequence[FeedbackRecord],
    ) -> AIResult[TemplateImprovement]:
        summary = summarize_feedback(history)
        prompt = (
            "Improve this reply template using its performance data.\n\n"
            f"Template: {template_content}\n\n"
            f"- Success rate: {summary['success_rate'] * 100:.1f}%\n"
            f"- Average customer rating: {summary['average_rating']:.1f}/5\n"
            f"- Times used: {summary['total_usage']}\n\n"
            "Answer with JSON: "
            '{"improvedContent": "the new template", '
            '"improvements": ["each change you made"], "confidence": 0.0-1.0}'
        )

        def build(data: Dict[str, Any]) -> TemplateImprovement:
            return TemplateImprovement(
                improved_content=str(data.get("improvedContent") or template_content),
                improvements=_string_list(data.get("improvements")),
                confidence=clamp_confidence(data.get("confidence")),
            )

        def fallback() -> TemplateImprovement:
            return TemplateImprovement(
                improved_content=template_content, improvements=[], confidence=0.0
            )

        return self._run("improve_template", IMPROVE_SYSTEM, prompt, build, fallback)
