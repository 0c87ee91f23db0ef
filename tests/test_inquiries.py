"""Inquiry intake: classification, auto-response and failure handling."""
import threading
from concurrent.futures import ThreadPoolExecutor

from replydesk.schemas.template import TemplateCreate
from replydesk.services.llm import LLMProvider


def _pricing_template(storage, owner):
    return storage.create_template(TemplateCreate(
        user_id=owner.id,
        name="Pricing Request",
        category="pricing",
        content="Thank you for reaching out. I'd be happy to provide a quote.",
        times_used=28,
    ))


def test_intake_auto_responds_with_suggested_template(client, storage, owner, llm):
    template = _pricing_template(storage, owner)
    llm.script(
        {
            "category": "pricing",
            "priority": "urgent",
            "intent": "Wants a quote",
            "confidence": 0.9,
            "requiredVariables": [],
            "suggestedTemplateId": template.id,
        },
        {"content": "Happy to send a quote today.", "confidence": 0.8, "variables": {}},
    )

    response = client.post("/api/inquiries", json={"content": "Need a quote ASAP"})
    assert response.status_code == 201
    inquiry = response.json()
    assert inquiry["category"] == "pricing"
    assert inquiry["priority"] == "urgent"
    assert inquiry["subject"] is None
    assert inquiry["source"] == "email"
    assert inquiry["aiClassification"]["suggestedTemplateId"] == template.id
    assert inquiry["aiClassification"]["confidence"] == 0.9

    replies = storage.get_responses(inquiry["id"])
    assert len(replies) == 1
    assert replies[0].template_id == template.id
    assert replies[0].is_automated is True
    assert replies[0].was_modified is False
    assert replies[0].content == "Happy to send a quote today."
    assert storage.get_template(template.id).times_used == 29


def test_intake_stores_inquiry_when_classifier_fails(client, storage, owner, llm):
    _pricing_template(storage, owner)
    llm.script(RuntimeError("service unavailable"))

    response = client.post("/api/inquiries", json={"subject": "Hi", "content": "Are you free next month?"})
    assert response.status_code == 201
    inquiry = response.json()
    assert inquiry["category"] == "general"
    assert inquiry["priority"] == "normal"
    assert inquiry["aiClassification"]["intent"] == "Unable to classify inquiry"
    assert inquiry["aiClassification"]["confidence"] == 0.0
    assert storage.get_responses(inquiry["id"]) == []
    assert len(storage.get_inquiries(owner.id)) == 1


def test_intake_unknown_suggested_template_skips_reply(client, storage, owner, llm):
    llm.script({"category": "project", "suggestedTemplateId": "does-not-exist"})
    inquiry = client.post("/api/inquiries", json={"content": "New website"}).json()
    assert inquiry["category"] == "project"
    assert storage.get_responses(inquiry["id"]) == []
    assert len(llm.calls) == 1


def test_intake_generation_failure_still_replies_with_template(client, storage, owner, llm):
    template = _pricing_template(storage, owner)
    llm.script({"category": "pricing", "suggestedTemplateId": template.id}, RuntimeError("down"))
    inquiry = client.post("/api/inquiries", json={"content": "Rates?"}).json()
    replies = storage.get_responses(inquiry["id"])
    assert [r.content for r in replies] == [template.content]


def test_intake_ignores_client_category(client, storage, owner, llm):
    llm.script({"category": "support", "priority": "low"})
    inquiry = client.post(
        "/api/inquiries",
        json={"content": "Bug report", "category": "pricing", "priority": "urgent", "sender": "a@b.com"},
    ).json()
    assert inquiry["category"] == "support"
    assert inquiry["priority"] == "low"
    assert inquiry["sender"] == "a@b.com"


def test_intake_invalid_body_skips_classification(client, owner, llm):
    response = client.post("/api/inquiries", json={"subject": "no content"})
    assert response.status_code == 400
    assert "content" in response.json()["detail"]
    assert llm.calls == []


def test_intake_requires_owner(client, llm):
    response = client.post("/api/inquiries", json={"content": "Hello"})
    assert response.status_code == 404
    assert llm.calls == []


def test_list_inquiries_and_responses(client, storage, owner, llm):
    llm.script({"category": "general"})
    created = client.post("/api/inquiries", json={"content": "Hello"}).json()
    listed = client.get("/api/inquiries").json()
    assert [i["id"] for i in listed] == [created["id"]]

    assert client.get(f"/api/inquiries/{created['id']}/responses").json() == []
    missing = client.get("/api/inquiries/nope/responses")
    assert missing.status_code == 404


class _LockstepProvider(LLMProvider):
    """Suggests one template and holds every generation until both intakes reach it."""

    PROVIDER_NAME = "lockstep"

    def _init_client(self, template_id=None, **kwargs) -> None:
        self.template_id = template_id
        self.barrier = threading.Barrier(2, timeout=10)

    def _call_api(self, messages, config):
        if "Classify" in messages[1]["content"]:
            return f'{{"category": "pricing", "suggestedTemplateId": "{self.template_id}"}}', 10, 5
        self.barrier.wait()
        return '{"content": "Quote on its way.", "confidence": 0.7}', 10, 5

    def is_available(self) -> bool:
        return True


def test_concurrent_intakes_each_count_template_usage(client, storage, owner, gateway):
    template = _pricing_template(storage, owner)
    gateway.provider = _LockstepProvider(template_id=template.id)

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [
            pool.submit(client.post, "/api/inquiries", json={"content": f"Quote please #{n}"})
            for n in range(2)
        ]
        statuses = [f.result().status_code for f in futures]

    assert statuses == [201, 201]
    assert storage.get_template(template.id).times_used == 30
    automated = [
        r for inquiry in storage.get_inquiries(owner.id) for r in storage.get_responses(inquiry.id)
    ]
    assert len(automated) == 2
