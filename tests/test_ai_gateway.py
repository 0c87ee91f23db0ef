"""AI gateway: clamping, coercion and degraded fallbacks."""
import pytest

from replydesk.schemas.ai import FeedbackRecord, InquiryCategory, Priority
from replydesk.services.ai_gateway import AIGateway, clamp_confidence, round_rating, summarize_feedback
from replydesk.services.llm import LLMConfig


@pytest.mark.parametrize("raw,expected", [
    (1.5, 1.0), (-0.2, 0.0), (0.42, 0.42), (None, 0.5), ("0.8", 0.8), ("NaN", 0.0), (float("nan"), 0.0),
])
def test_clamp_confidence(raw, expected):
    assert clamp_confidence(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw,expected", [(2.5, 3), (4.4, 4), (4.5, 5), (9, 5), (0.2, 1), (None, 3)])
def test_round_rating(raw, expected):
    assert round_rating(raw) == expected


def test_classify_ok_clamps_confidence(gateway, llm):
    llm.script({
        "category": "pricing",
        "priority": "urgent",
        "intent": "Wants a quote",
        "confidence": 1.5,
        "requiredVariables": ["budget"],
        "suggestedTemplateId": "tpl-1",
    })
    result = gateway.classify_inquiry(None, "Need a quote ASAP", [])
    assert result.status == "ok"
    assert not result.degraded
    assert result.payload.category == InquiryCategory.pricing
    assert result.payload.priority == Priority.urgent
    assert result.payload.confidence == 1.0
    assert result.payload.required_variables == ["budget"]
    assert result.payload.suggested_template_id == "tpl-1"
    assert "No subject" in llm.calls[0][1]["content"]


def test_classify_coerces_unknown_values(gateway, llm):
    llm.script({"category": "billing", "priority": "critical", "confidence": -0.2})
    payload = gateway.classify_inquiry("Invoice", "Where is my invoice?", []).payload
    assert payload.category == InquiryCategory.general
    assert payload.priority == Priority.normal
    assert payload.intent == "General inquiry"
    assert payload.confidence == 0.0
    assert payload.suggested_template_id is None


def test_classify_missing_confidence_defaults_to_half(gateway, llm):
    llm.script({"category": "support"})
    assert gateway.classify_inquiry(None, "Help", []).payload.confidence == 0.5


def test_classify_provider_error_degrades(gateway, llm):
    llm.script(RuntimeError("model exploded"))
    result = gateway.classify_inquiry(None, "Hello", [])
    assert result.degraded
    assert "model exploded" in result.cause
    assert result.payload.category == InquiryCategory.general
    assert result.payload.priority == Priority.normal
    assert result.payload.intent == "Unable to classify inquiry"
    assert result.payload.confidence == 0.0
    assert result.payload.required_variables == []
    assert result.payload.suggested_template_id is None


def test_classify_malformed_reply_degrades(gateway, llm):
    llm.script("this is not json at all")
    assert gateway.classify_inquiry(None, "Hello", []).degraded


def test_classify_wrong_payload_type_degrades(gateway, llm):
    llm.script({"category": "project", "requiredVariables": "budget"})
    assert gateway.classify_inquiry(None, "Hello", []).degraded


def test_generate_response_falls_back_to_template(gateway, llm):
    llm.script({"confidence": 0.7})
    result = gateway.generate_response("Quote please", "Thanks for reaching out.")
    assert result.status == "ok"
    assert result.payload.content == "Thanks for reaching out."
    assert result.payload.confidence == 0.7

    llm.script(TimeoutError("Request timed out"))
    failed = gateway.generate_response("Quote please", "Thanks for reaching out.", {"budget": "5k"})
    assert failed.degraded
    assert failed.payload.content == "Thanks for reaching out."
    assert failed.payload.confidence == 0.0
    assert failed.payload.variables == {}


def test_generate_response_stringifies_variables(gateway, llm):
    llm.script({"content": "Hi Ana", "confidence": 0.9, "variables": {"budget": 5000}})
    payload = gateway.generate_response("Quote please", "Hi {name}").payload
    assert payload.content == "Hi Ana"
    assert payload.variables == {"budget": "5000"}


def test_analyze_sentiment(gateway, llm):
    llm.script({"rating": 4.5, "confidence": 0.8})
    payload = gateway.analyze_sentiment("Great work, thanks!").payload
    assert payload.rating == 5
    assert payload.confidence == 0.8

    llm.script(RuntimeError("down"))
    failed = gateway.analyze_sentiment("meh")
    assert failed.degraded
    assert failed.payload.rating == 3
    assert failed.payload.confidence == 0.0


def test_summarize_feedback_empty_history():
    assert summarize_feedback([]) == {"success_rate": 0.0, "average_rating": 0.0, "total_usage": 0}


def test_summarize_feedback_ignores_missing_ratings():
    history = [
        FeedbackRecord(success=True, customer_feedback=5),
        FeedbackRecord(success=False),
        FeedbackRecord(success=True, customer_feedback=3),
    ]
    summary = summarize_feedback(history)
    assert summary["success_rate"] == pytest.approx(2 / 3)
    assert summary["average_rating"] == 4.0
    assert summary["total_usage"] == 3


def test_improve_template_prompt_and_result(gateway, llm):
    llm.script({"improvedContent": "Better", "improvements": ["Shorter"], "confidence": 2})
    history = [FeedbackRecord(success=True, customer_feedback=4), FeedbackRecord(success=False)]
    result = gateway.improve_template("Original", history)

    assert result.payload.improved_content == "Better"
    assert result.payload.improvements == ["Shorter"]
    assert result.payload.confidence == 1.0
    prompt = llm.calls[0][1]["content"]
    assert "50.0%" in prompt
    assert "4.0/5" in prompt


def test_improve_template_failure_keeps_original(gateway, llm):
    llm.script(RuntimeError("down"))
    result = gateway.improve_template("Original", [])
    assert result.degraded
    assert result.payload.improved_content == "Original"
    assert result.payload.improvements == []
    assert result.payload.confidence == 0.0


def test_transient_errors_are_retried(llm):
    llm.script(RuntimeError("Rate limit exceeded (429)"), {"rating": 2, "confidence": 0.6})
    gateway = AIGateway(llm, LLMConfig(max_retries=2))
    result = gateway.analyze_sentiment("not great")
    assert result.status == "ok"
    assert result.payload.rating == 2
    assert len(llm.calls) == 2


def test_default_config_makes_a_single_attempt(llm):
    llm.script(RuntimeError("Rate limit exceeded (429)"), {"rating": 2, "confidence": 0.6})
    result = AIGateway(llm).analyze_sentiment("not great")
    assert result.degraded
    assert len(llm.calls) == 1
    assert LLMConfig().max_retries == 0


def test_nan_confidence_from_model_is_zero(gateway, llm):
    llm.script('{"rating": 4, "confidence": NaN}')
    payload = gateway.analyze_sentiment("fine").payload
    assert payload.rating == 4
    assert payload.confidence == 0.0


def test_non_transient_errors_are_not_retried(llm):
    llm.script(ValueError("invalid request"), {"rating": 5})
    gateway = AIGateway(llm, LLMConfig(max_retries=3))
    assert gateway.analyze_sentiment("hmm").degraded
    assert len(llm.calls) == 1


def test_fenced_json_reply_is_parsed(gateway, llm):
    llm.script('```json\n{"rating": 1, "confidence": 0.3,}\n```')
    payload = gateway.analyze_sentiment("awful").payload
    assert payload.rating == 1
    assert payload.confidence == 0.3
