# tests/test_upstage_gateway.py

from types import SimpleNamespace

import httpx
import openai
import pytest

from sportsquiz.infrastructure import upstage_llm
from sportsquiz.infrastructure.upstage_llm import UpstageLLMGateway
from sportsquiz.ports.llm_gateway import LLMAPIError, LLMTimeoutError


class FakeChatUpstage:
    """Stands in for ChatUpstage; records constructor kwargs"""

    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.content = "  [1]  "
        self.error = None
        FakeChatUpstage.instances.append(self)

    def invoke(self, prompt):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)


@pytest.fixture(autouse=True)
def fake_chat(monkeypatch):
    FakeChatUpstage.instances = []
    monkeypatch.setattr(upstage_llm, "ChatUpstage", FakeChatUpstage)
    return FakeChatUpstage


class TestUpstageLLMGateway:

    def test_invoke_returns_stripped_text(self, fake_chat):
        gateway = UpstageLLMGateway(api_key="k", model="solar-pro", timeout=5)

        assert gateway.invoke("prompt") == "[1]"
        assert fake_chat.instances[0].kwargs["api_key"] == "k"
        assert fake_chat.instances[0].kwargs["timeout"] == 5
        assert gateway.get_model_name() == "solar-pro"

    def test_multipart_content_is_joined(self, fake_chat):
        gateway = UpstageLLMGateway(api_key="k")
        fake_chat.instances[0].content = ["[", {"type": "text", "text": "1]"}]

        assert gateway.invoke("prompt") == "[1]"

    def test_temperature_override_builds_new_client(self, fake_chat):
        gateway = UpstageLLMGateway(api_key="k", temperature=0.7)
        gateway.invoke("prompt", temperature=0.2)

        assert len(fake_chat.instances) == 2
        assert fake_chat.instances[1].kwargs["temperature"] == 0.2

    def test_timeout(self, fake_chat):
        gateway = UpstageLLMGateway(api_key="k")
        request = httpx.Request("POST", "https://api.upstage.ai/v1/chat/completions")
        fake_chat.instances[0].error = openai.APITimeoutError(request=request)

        with pytest.raises(LLMTimeoutError):
            gateway.invoke("prompt")

    def test_api_error(self, fake_chat):
        gateway = UpstageLLMGateway(api_key="k")
        fake_chat.instances[0].error = RuntimeError("quota exceeded")

        with pytest.raises(LLMAPIError):
            gateway.invoke("prompt")
