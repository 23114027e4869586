"""
Tests for conversations, messages, bookmarks, LLM helpers and pipeline
inspection.
"""
from database.models import PipelineRun, PipelineRunStep
from repositories import LLMHistoryRepository, SettingRepository
from tests.conftest import rate_limited


async def create_conversation(client, **body):
    response = await client.post("/api/conversations", json=body)
    assert response.status_code == 201
    return response.json()


async def add_message(client, conversation_id, content, role="user", **extra):
    response = await client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"message": {"role": role, "content": content, **extra}},
    )
    assert response.status_code == 201
    return response.json()


class TestConversationRoutes:
    """CRUD over /api/conversations."""

    async def test_create_uses_defaults(self, client):
        conversation = await create_conversation(client)

        assert conversation["title"] == "New Chat"
        assert conversation["use_semantic_memory"] is True
        assert conversation["enable_memory_extraction"] is True

    async def test_create_reads_stored_default_settings(self, client, session):
        await SettingRepository(session).upsert_many({
            "defaultModelConfig": {"model": "gemini-pro", "temperature": 0.2, "topP": 0.5},
            "featureFlags": {"enableMemoryExtraction": False},
        })
        await session.commit()

        conversation = await create_conversation(client, title="Planning")

        assert conversation["title"] == "Planning"
        assert conversation["model"] == "gemini-pro"
        assert conversation["temperature"] == 0.2
        assert conversation["top_p"] == 0.5
        assert conversation["enable_memory_extraction"] is False

    async def test_list_most_recently_active_first(self, client):
        older = await create_conversation(client, title="Older")
        await create_conversation(client, title="Newer")
        await add_message(client, older["id"], "bump")

        titles = [c["title"] for c in (await client.get("/api/conversations")).json()]

        assert titles == ["Older", "Newer"]

    async def test_partial_update(self, client):
        conversation = await create_conversation(client)

        response = await client.put(f"/api/conversations/{conversation['id']}", json={
            "title": "Renamed",
            "uiSettings": {"theme": "dark"},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["ui_settings"] == {"theme": "dark"}
        assert body["model"] == conversation["model"]

    async def test_update_without_fields(self, client):
        conversation = await create_conversation(client)

        response = await client.put(f"/api/conversations/{conversation['id']}", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "No fields to update"}

    async def test_update_rejects_null_title(self, client):
        conversation = await create_conversation(client)

        response = await client.put(f"/api/conversations/{conversation['id']}", json={"title": None})

        assert response.status_code == 400
        assert response.json() == {"error": "Fields cannot be null: title"}

    async def test_update_unknown_conversation(self, client):
        response = await client.put("/api/conversations/nope", json={"title": "x"})

        assert response.status_code == 404
        assert response.json() == {"error": "Conversation not found"}

    async def test_delete_removes_messages(self, client):
        conversation = await create_conversation(client)
        message = await add_message(client, conversation["id"], "hello")

        deleted = await client.delete(f"/api/conversations/{conversation['id']}")

        assert deleted.json() == {"message": "Conversation deleted successfully"}
        assert (await client.delete(f"/api/messages/{message['id']}")).status_code == 404


class TestMessageRoutes:
    """Messages, bookmarks and in-conversation search."""

    async def test_messages_are_chronological(self, client):
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "first")
        await add_message(client, conversation["id"], "second", role="model")

        messages = (await client.get(f"/api/conversations/{conversation['id']}/messages")).json()

        assert [m["content"] for m in messages] == ["first", "second"]
        assert [m["role"] for m in messages] == ["user", "model"]

    async def test_create_validates_body(self, client):
        conversation = await create_conversation(client)
        url = f"/api/conversations/{conversation['id']}/messages"

        empty = await client.post(url, json={"message": {"role": "user", "content": ""}})
        bad_role = await client.post(url, json={"message": {"role": "robot", "content": "hi"}})

        assert empty.json() == {"error": "Message is required"}
        assert bad_role.status_code == 400
        assert bad_role.json() == {"error": "Invalid message role: robot"}

    async def test_create_in_unknown_conversation(self, client):
        response = await client.post(
            "/api/conversations/nope/messages",
            json={"message": {"role": "user", "content": "hi"}},
        )

        assert response.status_code == 404

    async def test_update_reestimates_tokens(self, client):
        conversation = await create_conversation(client)
        message = await add_message(client, conversation["id"], "hi")

        response = await client.put(f"/api/messages/{message['id']}", json={"content": "x" * 10})

        assert response.json()["content"] == "x" * 10
        assert response.json()["token_count"] == 3

    async def test_update_requires_content(self, client):
        conversation = await create_conversation(client)
        message = await add_message(client, conversation["id"], "hi")

        response = await client.put(f"/api/messages/{message['id']}", json={"content": "   "})

        assert response.status_code == 400
        assert response.json() == {"error": "Content is required"}

    async def test_bookmark_toggle_and_listing(self, client):
        conversation = await create_conversation(client)
        keep = await add_message(client, conversation["id"], "keep me")
        await add_message(client, conversation["id"], "ignore me")

        on = await client.put(f"/api/messages/{keep['id']}/bookmark")
        bookmarks = (await client.get("/api/bookmarks")).json()
        off = await client.put(f"/api/messages/{keep['id']}/bookmark")

        assert on.json()["is_bookmarked"] is True
        assert [m["id"] for m in bookmarks] == [keep["id"]]
        assert off.json()["is_bookmarked"] is False
        assert (await client.get("/api/bookmarks")).json() == []

    async def test_search_is_case_insensitive(self, client):
        conversation = await create_conversation(client)
        other = await create_conversation(client)
        await add_message(client, conversation["id"], "The Quick fox")
        await add_message(client, conversation["id"], "lazy dog")
        await add_message(client, other["id"], "quick elsewhere")

        response = await client.get(f"/api/conversations/{conversation['id']}/search", params={"q": "quick"})

        assert [m["content"] for m in response.json()["messages"]] == ["The Quick fox"]

    async def test_clear_messages(self, client):
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "one")
        await add_message(client, conversation["id"], "two")

        response = await client.post(f"/api/conversations/{conversation['id']}/clear-messages")

        assert response.json() == {"success": True, "message": "Cleared 2 messages."}
        assert (await client.get(f"/api/conversations/{conversation['id']}/messages")).json() == []

    async def test_delete_message(self, client):
        conversation = await create_conversation(client)
        message = await add_message(client, conversation["id"], "bye")

        response = await client.delete(f"/api/messages/{message['id']}")

        assert response.json() == {"message": "Message deleted successfully"}


class TestConversationLLMHelpers:
    """Title, summary and context summary generation."""

    async def test_generate_title_strips_quotes(self, client, fake_llm, session):
        fake_llm.replies = ['"Trip to Lisbon"']
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "Plan my trip to Lisbon")

        response = await client.post(f"/api/conversations/{conversation['id']}/generate-title")

        assert response.status_code == 200
        assert response.json()["title"] == "Trip to Lisbon"
        history = await LLMHistoryRepository(session).get_recent(task_type="title")
        assert len(history) == 1
        assert history[0].conversation_id == conversation["id"]

    async def test_generate_title_for_empty_conversation(self, client):
        conversation = await create_conversation(client)

        response = await client.post(f"/api/conversations/{conversation['id']}/generate-title")

        assert response.status_code == 400
        assert response.json() == {"error": "Cannot generate title for an empty conversation"}

    async def test_generate_title_blank_reply(self, client, fake_llm):
        fake_llm.replies = ['""']
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "hi")

        response = await client.post(f"/api/conversations/{conversation['id']}/generate-title")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate title from the AI model"}

    async def test_summarize_stores_summary(self, client, fake_llm):
        fake_llm.replies = ["  We planned a trip.  "]
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "Plan my trip")

        response = await client.post(f"/api/conversations/{conversation['id']}/summarize")

        assert response.json() == {"id": conversation["id"], "summary": "We planned a trip."}
        stored = (await client.get(f"/api/conversations/{conversation['id']}")).json()
        assert stored["summary"] == "We planned a trip."

    async def test_summarize_empty_conversation(self, client, fake_llm):
        conversation = await create_conversation(client)

        response = await client.post(f"/api/conversations/{conversation['id']}/summarize")

        assert response.status_code == 200
        assert response.json() == {"message": "Conversation is empty, nothing to summarize."}
        assert fake_llm.calls == []

    async def test_summarize_for_context(self, client, fake_llm):
        fake_llm.replies = ["User wants to visit Lisbon."]
        conversation = await create_conversation(client)
        message = await add_message(client, conversation["id"], "I really want to go to Lisbon next spring")

        response = await client.post(f"/api/messages/{message['id']}/summarize-for-context")

        assert response.json() == {
            "success": True,
            "messageId": message["id"],
            "summary": "User wants to visit Lisbon.",
        }
        messages = (await client.get(f"/api/conversations/{conversation['id']}/messages")).json()
        assert messages[0]["content_summary"] == "User wants to visit Lisbon."

    async def test_rate_limit_is_retried(self, client, fake_llm):
        fake_llm.replies = [rate_limited(), "Lisbon"]
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "hi")

        response = await client.post(f"/api/conversations/{conversation['id']}/generate-title")

        assert response.status_code == 200
        assert response.json()["title"] == "Lisbon"
        assert len(fake_llm.calls) == 2

    async def test_persistent_rate_limit_returns_429(self, client, fake_llm):
        fake_llm.replies = [rate_limited()]
        conversation = await create_conversation(client)
        await add_message(client, conversation["id"], "hi")

        response = await client.post(f"/api/conversations/{conversation['id']}/generate-title")

        assert response.status_code == 429
        assert "Rate Limit" in response.json()["error"]


class TestInspect:
    """Pipeline inspection of a message."""

    async def test_placeholder_when_no_runs(self, client):
        response = await client.get("/api/inspect/unknown-message")

        assert response.json() == {
            "pipelineRun": {
                "final_output": "No pipeline run found.",
                "pipeline_type": "N/A",
                "status": "not_found",
            },
            "allRuns": [],
            "pipelineSteps": [],
        }

    async def test_context_assembly_run_is_primary(self, client, session):
        extraction = PipelineRun(message_id="m1", pipeline_type="MemoryExtraction", status="completed")
        assembly = PipelineRun(message_id="m1", pipeline_type="ContextAssembly", status="completed")
        session.add_all([extraction, assembly])
        await session.flush()
        session.add_all([
            PipelineRunStep(run_id=assembly.id, step_order=2, step_name="Build prompt", status="completed"),
            PipelineRunStep(run_id=assembly.id, step_order=1, step_name="Load memory", status="completed"),
            PipelineRunStep(run_id=extraction.id, step_order=1, step_name="Extract", status="completed"),
        ])
        await session.commit()

        body = (await client.get("/api/inspect/m1")).json()

        assert body["pipelineRun"]["id"] == assembly.id
        assert len(body["allRuns"]) == 2
        assert [s["step_name"] for s in body["pipelineSteps"]] == ["Load memory", "Build prompt"]
