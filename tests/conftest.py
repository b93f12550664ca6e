import httpx
import pytest

from termchat.config import ChatConfig
from termchat.transport import ChatTransport

API_URL = "https://chat.example.test/api/v1/chat/completions"

ENV_VARS = (
    "OPENROUTER_API_KEY",
    "TERMCHAT_API_URL",
    "TERMCHAT_MODEL",
    "TERMCHAT_SYSTEM_PROMPT",
    "TERMCHAT_MAX_CONTEXT_MESSAGES",
    "TERMCHAT_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # set first so teardown also removes values a test loads from a .env file
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def api_url():
    return API_URL


@pytest.fixture
def config():
    return ChatConfig(api_key="test-key", api_url=API_URL, model="test/model")


class RecordingBackend:
    """Serves canned responses and keeps every request it saw."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, body = item
        return httpx.Response(status, content=body.encode("utf-8"))


@pytest.fixture
def backend_factory():
    def make(*responses):
        backend = RecordingBackend(responses)
        transport = ChatTransport(API_URL, "test-key", transport=httpx.MockTransport(backend))
        return backend, transport

    return make
