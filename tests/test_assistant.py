"""
Tests for the text assistant, its prompt templates and the stateless
assistant routes.
"""
import pytest

from llm import LLMError, set_llm_context
from processor import TextAssistant, AssistantError
from prompts import PromptLoader, get_prompt, list_prompts
from repositories import LLMHistoryRepository
from tests.conftest import FakeLLMClient, rate_limited


def make_assistant(*replies, max_retries=3):
    sleeps = []
    assistant = TextAssistant(
        FakeLLMClient(list(replies)),
        max_retries=max_retries,
        retry_delay=1.0,
        sleep=sleeps.append,
    )
    return assistant, sleeps


class TestTextAssistant:
    """Helpers and the rate-limit retry loop."""

    def test_title_is_unquoted(self):
        assistant, _ = make_assistant('  "Weekend in Porto"  ')

        title = assistant.generate_title([{"role": "user", "content": "Plan a weekend in Porto"}])

        assert title == "Weekend in Porto"

    def test_title_uses_system_prompt_and_history(self):
        assistant, _ = make_assistant("Title")
        history = [
            {"role": "user", "content": "hi"},
            {"role": "model", "parts": [{"text": "hello "}, {"text": "there"}]},
        ]

        assistant.generate_title(history)

        call = assistant.client.calls[0]
        assert call["system"] == PromptLoader().get("conversation_title")
        assert [(m.role, m.content) for m in call["messages"]] == [("user", "hi"), ("model", "hello there")]

    def test_blank_reply_is_none(self):
        assistant, _ = make_assistant("   ")

        assert assistant.summarize_text("some text") is None

    def test_rewrite_prompt_includes_transcript(self):
        assistant, _ = make_assistant("Better prompt")
        history = [{"role": "user", "content": "I like trains"}]

        rewritten = assistant.rewrite_prompt("tell me stuff", history)

        assert rewritten == "Better prompt"
        request = assistant.client.calls[0]["messages"][0].content
        assert "user: I like trains" in request
        assert '"tell me stuff"' in request

    def test_rewrite_prompt_with_empty_history(self):
        assistant, _ = make_assistant("Better prompt")

        assistant.rewrite_prompt("tell me stuff", [])

        assert "(empty)" in assistant.client.calls[0]["messages"][0].content

    def test_project_summary_lists_tasks(self):
        assistant, _ = make_assistant("Going well.")

        summary = assistant.summarize_project(
            {"name": "Launch", "description": None, "status": "active", "due_date": None},
            [{"title": "Docs", "status": "done"}, {"title": "Publish", "status": "todo"}],
        )

        assert summary == "Going well."
        request = assistant.client.calls[0]["messages"][0].content
        assert "Project Name: Launch" in request
        assert "- [x] Docs\n- [ ] Publish" in request
        assert assistant.client.calls[0]["system"] is None

    def test_retries_with_doubling_delay(self):
        assistant, sleeps = make_assistant(rate_limited(), rate_limited(), "Summary")

        assert assistant.summarize_for_context("long message") == "Summary"
        assert sleeps == [1.0, 2.0]

    def test_gives_up_after_max_retries(self):
        assistant, sleeps = make_assistant(rate_limited(), max_retries=2)

        with pytest.raises(AssistantError, match="Rate Limit"):
            assistant.summarize_conversation([{"role": "user", "content": "hi"}])

        assert sleeps == [1.0, 2.0]
        assert len(assistant.client.calls) == 3

    def test_other_errors_are_not_retried(self):
        assistant, sleeps = make_assistant(LLMError("bad request"))

        with pytest.raises(LLMError):
            assistant.summarize_text("text")

        assert sleeps == []

    def test_transcript_format(self):
        transcript = TextAssistant.format_transcript([
            {"role": "user", "content": "a"},
            {"role": "model", "content": "b"},
        ])

        assert transcript == "user: a\nmodel: b"


class TestPromptLoader:
    """Markdown prompt templates."""

    def test_all_templates_present(self):
        assert set(list_prompts()) >= {
            "conversation_title",
            "conversation_summary",
            "text_summary",
            "context_summary",
            "prompt_rewriter",
            "rewrite_request",
            "project_summary",
        }

    def test_format_and_variables(self):
        loader = PromptLoader()

        assert loader.get_variables("rewrite_request") == ["history", "prompt"]
        assert "ping" in get_prompt("rewrite_request", history="h", prompt="ping")

    def test_missing_variable(self):
        with pytest.raises(ValueError, match="history"):
            PromptLoader().format("rewrite_request", prompt="ping")

    def test_unknown_prompt(self):
        with pytest.raises(FileNotFoundError):
            PromptLoader().get("does_not_exist")

    def test_reload_clears_cache(self):
        loader = PromptLoader()
        loader.get("text_summary")

        loader.reload("text_summary")

        assert "text_summary" not in loader._cache


class TestAssistantRoutes:
    """/api/summarize and /api/prompt/regenerate."""

    async def test_summarize(self, client, fake_llm, session):
        fake_llm.replies = ["Short version."]

        response = await client.post("/api/summarize", json={"text": "A very long text."})

        assert response.status_code == 200
        assert response.json() == {"summary": "Short version."}
        history = await LLMHistoryRepository(session).get_recent(task_type="text_summary")
        assert [h.response for h in history] == ["Short version."]

    async def test_only_calls_of_the_request_are_stored(self, client, fake_llm, session):
        set_llm_context(task_type="background", call_group="other-request")
        fake_llm.generate("still running elsewhere")
        fake_llm.replies = ["Short version."]

        await client.post("/api/summarize", json={"text": "A very long text."})

        history = await LLMHistoryRepository(session).get_recent()
        assert [h.response for h in history] == ["Short version."]
        pending = fake_llm.drain_logs("other-request")
        assert [r.user_prompt for r in pending] == ["still running elsewhere"]
        assert fake_llm.drain_logs() == []

    async def test_summarize_requires_text(self, client):
        response = await client.post("/api/summarize", json={"text": "  "})

        assert response.status_code == 400
        assert response.json() == {"error": "Text is required"}

    async def test_summarize_rate_limited(self, client, fake_llm):
        fake_llm.replies = [rate_limited()]

        response = await client.post("/api/summarize", json={"text": "A very long text."})

        assert response.status_code == 429
        assert response.json() == {
            "error": "AI service is currently busy (Rate Limit). Please try again in a few moments."
        }

    async def test_regenerate_prompt(self, client, fake_llm):
        fake_llm.replies = ["What are the best trains in Europe?"]

        response = await client.post("/api/prompt/regenerate", json={
            "promptToRewrite": "trains?",
            "history": [{"role": "user", "content": "I travel a lot"}],
        })

        assert response.json() == {"rewrittenPrompt": "What are the best trains in Europe?"}

    async def test_regenerate_requires_history(self, client):
        response = await client.post("/api/prompt/regenerate", json={"promptToRewrite": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing promptToRewrite or history"}

    async def test_blank_rewrite(self, client, fake_llm):
        fake_llm.replies = [" "]

        response = await client.post("/api/prompt/regenerate", json={"promptToRewrite": "x", "history": []})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to regenerate prompt from AI model"}
