import json
import os

os.environ["ENV"] = "test"
os.environ.setdefault("SEED_DEMO_DATA", "false")

import pytest
from fastapi.testclient import TestClient

from replydesk.core.settings import settings
from replydesk.deps import get_ai_gateway, get_storage
from replydesk.main import app
from replydesk.schemas.user import UserCreate
from replydesk.services.ai_gateway import AIGateway
from replydesk.services.llm import LLMConfig, LLMProvider
from replydesk.storage import MemStorage


class StubLLMProvider(LLMProvider):
    """Scripted stand-in for the external model.

    Each queued reply is either a dict (sent back as JSON), a raw string, or
    an exception to raise from the API call. With an empty queue it answers "{}".
    """

    PROVIDER_NAME = "stub"
    DEFAULT_MODEL = "stub-model"
    RETRY_BASE_DELAY = 0

    def _init_client(self, **kwargs) -> None:
        self.replies = []
        self.calls = []

    def script(self, *replies):
        self.replies.extend(replies)
        return self

    def _call_api(self, messages, config):
        self.calls.append(messages)
        reply = self.replies.pop(0) if self.replies else {}
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, (dict, list)):
            reply = json.dumps(reply)
        return reply, 10, 5

    def is_available(self) -> bool:
        return True


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def owner(storage):
    return storage.create_user(UserCreate(username=settings.demo_username, password="password123"))


@pytest.fixture
def llm():
    return StubLLMProvider()


@pytest.fixture
def gateway(llm):
    return AIGateway(llm, LLMConfig(max_retries=0))


@pytest.fixture
def client(storage, gateway):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_ai_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
