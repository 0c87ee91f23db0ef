"""Response endpoints and feedback updates."""
from replydesk.schemas.inquiry import InquiryCreate
from replydesk.schemas.response import ResponseCreate
from replydesk.schemas.user import UserCreate


def _inquiry(storage, user_id):
    return storage.create_inquiry(InquiryCreate(user_id=user_id, content="Need a quote"))


def test_create_response_defaults(client, storage, owner):
    inquiry = _inquiry(storage, owner.id)
    response = client.post("/api/responses", json={"inquiryId": inquiry.id, "content": "Hi there"})
    assert response.status_code == 201
    data = response.json()
    assert data["isAutomated"] is True
    assert data["wasModified"] is False
    assert data["templateId"] is None
    assert data["customerFeedback"] is None
    assert data["success"] is None
    assert data["sentAt"]


def test_create_response_requires_content(client, owner):
    response = client.post("/api/responses", json={"inquiryId": "abc"})
    assert response.status_code == 400


def test_list_responses_scoped_to_owner(client, storage, owner):
    other = storage.create_user(UserCreate(username="someone.else", password="pw"))
    mine = storage.create_response(ResponseCreate(inquiry_id=_inquiry(storage, owner.id).id, content="mine"))
    storage.create_response(ResponseCreate(inquiry_id=_inquiry(storage, other.id).id, content="theirs"))

    data = client.get("/api/responses").json()
    assert [r["id"] for r in data] == [mine.id]


def test_feedback_changes_only_feedback_fields(client, storage, owner):
    inquiry = _inquiry(storage, owner.id)
    original = storage.create_response(ResponseCreate(
        inquiry_id=inquiry.id, template_id="tpl-1", content="Automated reply",
        is_automated=True, was_modified=False,
    ))

    response = client.put(
        f"/api/responses/{original.id}/feedback",
        json={"customerFeedback": 4, "success": True},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["customerFeedback"] == 4
    assert data["success"] is True
    assert data["content"] == "Automated reply"
    assert data["templateId"] == "tpl-1"

    stored = storage.get_responses(inquiry.id)[0]
    assert stored.sent_at == original.sent_at
    assert stored.is_automated is True
    assert stored.was_modified is False


def test_feedback_omitted_fields_keep_previous_values(client, storage, owner):
    inquiry = _inquiry(storage, owner.id)
    original = storage.create_response(ResponseCreate(inquiry_id=inquiry.id, content="x", success=True))
    data = client.put(f"/api/responses/{original.id}/feedback", json={"customerFeedback": 2}).json()
    assert data["customerFeedback"] == 2
    assert data["success"] is True


def test_feedback_missing_response(client, owner):
    response = client.put("/api/responses/nope/feedback", json={"success": False})
    assert response.status_code == 404
    assert response.json()["detail"] == "Response not found"
