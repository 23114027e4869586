"""
Tests for the LLM client layer: the Gemini client over a mocked transport,
client construction from settings, and call recording.
"""
import json

import httpx
import pytest
from openai import OpenAI

from llm import (
    GeminiClient,
    LLMError,
    LLMRateLimitError,
    Message,
    get_client,
    set_llm_context,
)

COMPLETION = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 0,
    "model": "gemini-2.5-flash",
    "choices": [{
        "index": 0,
        "message": {"role": "assistant", "content": "Hello!"},
        "finish_reason": "stop",
    }],
    "usage": {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15},
}


def mocked_client(handler) -> GeminiClient:
    client = GeminiClient(api_key="test-key")
    client._client = OpenAI(
        api_key="test-key",
        base_url=GeminiClient.API_BASE,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        max_retries=0,
    )
    return client


class TestGeminiClient:
    """Request mapping, response parsing and error translation."""

    def test_chat_maps_roles_and_parses_response(self):
        sent = {}

        def handler(request: httpx.Request) -> httpx.Response:
            sent.update(json.loads(request.content))
            return httpx.Response(200, json=COMPLETION)

        client = mocked_client(handler)
        response = client.chat(
            [Message(role="user", content="hi"), Message(role="model", content="hey"), Message(role="user", content="again")],
            system="Be brief",
        )

        assert [m["role"] for m in sent["messages"]] == ["system", "user", "assistant", "user"]
        assert sent["model"] == "gemini-2.5-flash"
        assert response.content == "Hello!"
        assert response.usage == {"input_tokens": 12, "output_tokens": 3}
        assert response.total_tokens == 15
        assert response.stop_reason == "stop"

    def test_calls_are_recorded_with_context(self):
        client = mocked_client(lambda request: httpx.Response(200, json=COMPLETION))
        set_llm_context(task_type="title", conversation_id="c1")

        client.generate("Name this chat", system="Titles only")
        records = client.drain_logs()

        assert len(records) == 1
        assert records[0].task_type == "title"
        assert records[0].conversation_id == "c1"
        assert records[0].user_prompt == "Name this chat"
        assert records[0].response == "Hello!"
        assert client.drain_logs() == []

    def test_rate_limit(self):
        client = mocked_client(lambda request: httpx.Response(429, json={"error": {"message": "slow down"}}))

        with pytest.raises(LLMRateLimitError):
            client.generate("hi")

    def test_other_errors(self):
        client = mocked_client(lambda request: httpx.Response(400, json={"error": {"message": "bad"}}))

        with pytest.raises(LLMError) as exc_info:
            client.generate("hi")

        assert not isinstance(exc_info.value, LLMRateLimitError)

    def test_logging_can_be_disabled(self):
        client = GeminiClient(api_key="test-key", enable_logging=False)
        client._client = mocked_client(lambda request: httpx.Response(200, json=COMPLETION))._client

        client.generate("hi")

        assert client.drain_logs() == []


class TestGetClient:
    """Construction from settings."""

    def test_missing_api_key(self):
        with pytest.raises(ValueError, match="API key required"):
            get_client(api_key="")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_client(provider="nope", api_key="k")

    def test_builds_gemini_client(self):
        client = get_client(api_key="k", model="gemini-2.5-pro")

        assert isinstance(client, GeminiClient)
        assert client.model == "gemini-2.5-pro"

    async def test_route_without_api_key(self, client, app):
        from api.dependencies import get_llm_client

        app.dependency_overrides.pop(get_llm_client)

        response = await client.post("/api/summarize", json={"text": "hello"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error: API key not found."}
