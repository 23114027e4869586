"""
Tests for health, settings, logs, dashboard, search and seeding.
"""
import pytest

from constants import FEATURE_STATUS_COLORS, DEFAULT_CHART_COLOR
from database.models import Feature, PipelineRun
from repositories import SettingRepository
from scripts.fixtures import FEATURES, DATA_SOURCES, API_ENDPOINTS, HEDRA_GOALS
from scripts.seed import run_seed


class TestHealthAndSettings:
    """Health check and global settings."""

    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_root(self, client):
        response = await client.get("/")

        assert response.json()["name"] == "SoulyCore"

    async def test_settings_upsert(self, client):
        first = await client.put("/api/settings", json={"enableDebugLog": {"enabled": True}})
        second = await client.put("/api/settings", json={"featureFlags": {"enableMemoryExtraction": False}})

        assert first.json() == {"enableDebugLog": {"enabled": True}}
        assert second.json() == {
            "enableDebugLog": {"enabled": True},
            "featureFlags": {"enableMemoryExtraction": False},
        }
        assert (await client.get("/api/settings")).json() == second.json()

    async def test_default_settings_inserted_once(self, session):
        repo = SettingRepository(session)

        added = await repo.ensure_defaults()
        again = await repo.ensure_defaults()

        assert added > 0
        assert again == 0
        assert (await repo.get_value("defaultModelConfig"))["model"] == "gemini-2.5-flash"


class TestLogRoutes:
    """Application log table."""

    async def test_create_list_and_clear(self, client):
        for message in ("first", "second"):
            response = await client.post("/api/logs/create", json={"message": message, "level": "info"})
            assert response.status_code == 201

        everything = (await client.get("/api/logs/all")).json()
        latest = (await client.get("/api/logs/all", params={"limit": 1})).json()

        assert len(everything) == 2
        assert len(latest) == 1

        cleared = await client.delete("/api/logs/all")
        assert cleared.json() == {"message": "All logs cleared successfully"}
        assert (await client.get("/api/logs/all")).json() == []

    async def test_payload_is_stored(self, client):
        response = await client.post("/api/logs/create", json={
            "message": "boom", "level": "error", "payload": {"code": 42},
        })

        assert response.json()["payload"] == {"code": 42}

    async def test_validation(self, client):
        missing = await client.post("/api/logs/create", json={"message": "x"})
        bad_level = await client.post("/api/logs/create", json={"message": "x", "level": "fatal"})

        assert missing.json() == {"error": "Message and level are required"}
        assert bad_level.json() == {"error": "Invalid log level: fatal"}

    async def test_limit_must_be_positive(self, client):
        response = await client.get("/api/logs/all", params={"limit": 0})

        assert response.status_code == 422


class TestDashboard:
    """Stats and chart data."""

    async def test_stats(self, client, session):
        busy = (await client.post("/api/conversations", json={"title": "Busy"})).json()
        await client.post("/api/conversations", json={"title": "Quiet"})
        for content in ("a", "b", "c"):
            await client.post(
                f"/api/conversations/{busy['id']}/messages",
                json={"message": {"role": "user", "content": content}},
            )
        await client.post("/api/features", json={"name": "Chat", "status": "✅ Completed"})
        await client.post("/api/features", json={"name": "Memory", "status": "⚪ Planned"})
        session.add_all([
            PipelineRun(message_id="m1", pipeline_type="ContextAssembly", status="completed", duration_ms=100),
            PipelineRun(message_id="m2", pipeline_type="ContextAssembly", status="completed", duration_ms=200),
            PipelineRun(message_id="m3", pipeline_type="ContextAssembly", status="failed", duration_ms=5),
        ])
        await session.commit()

        stats = (await client.get("/api/dashboard/stats")).json()

        assert stats["conversations"] == {"total": 2, "avgMessages": "1.5"}
        assert stats["messages"] == {"total": 3}
        assert stats["pipelines"]["contextAssembly"] == {"completed": 2, "failed": 1, "avgDuration": 150.0}
        assert stats["pipelines"]["memoryExtraction"] == {"completed": 0, "failed": 0, "avgDuration": 0}
        assert stats["project"]["featuresTracked"] == 2
        assert stats["project"]["featuresCompleted"] == 1
        assert stats["system"]["apiTestsRun"] == 0

    async def test_stats_on_empty_database(self, client):
        stats = (await client.get("/api/dashboard/stats")).json()

        assert stats["conversations"] == {"total": 0, "avgMessages": "0.0"}
        assert stats["memory"] == {"structuredEntities": 0, "contacts": 0, "brains": 0}

    async def test_charts(self, client, session):
        session.add_all([
            Feature(name="A", status="✅ Completed"),
            Feature(name="B", status="✅ Completed"),
            Feature(name="C", status="🔴 Needs Refactor"),
            Feature(name="D", status="Someday"),
            PipelineRun(message_id="m1", pipeline_type="MemoryExtraction", status="completed", duration_ms=41),
            PipelineRun(message_id="m2", pipeline_type="MemoryExtraction", status="completed", duration_ms=42),
        ])
        await session.commit()

        charts = (await client.get("/api/dashboard/charts")).json()

        slices = {s["name"]: s for s in charts["featureStatus"]}
        assert slices["Completed"] == {"name": "Completed", "value": 2, "fill": FEATURE_STATUS_COLORS["Completed"]}
        assert slices["Needs Refactor"]["value"] == 1
        assert slices["Other"] == {"name": "Other", "value": 1, "fill": DEFAULT_CHART_COLOR}
        assert charts["pipelinePerformance"] == [
            {"name": "Context Assembly", "Completed": 0, "Failed": 0, "Avg Duration (ms)": 0},
            {"name": "Memory Extraction", "Completed": 2, "Failed": 0, "Avg Duration (ms)": 42},
        ]

    async def test_quick_links_round_trip(self, client):
        links = [{"label": "Docs", "url": "https://example.com/docs"}]

        empty = await client.get("/api/dashboard/quick-links")
        saved = await client.post("/api/dashboard/quick-links", json={"links": links})

        assert empty.json() == {"links": []}
        assert saved.json() == {"success": True, "message": "Links saved successfully."}
        assert (await client.get("/api/dashboard/quick-links")).json() == {"links": links}

    async def test_quick_links_must_be_a_list(self, client):
        response = await client.post("/api/dashboard/quick-links", json={"links": {"label": "Docs"}})

        assert response.status_code == 400
        assert response.json() == {"error": "Links must be an array"}


class TestSearch:
    """Global search over conversation titles and contacts."""

    async def test_short_query_returns_nothing(self, client):
        response = await client.get("/api/search", params={"q": "a"})

        assert response.json() == {"results": []}

    async def test_matches_conversations_and_contacts(self, client):
        conversation = (await client.post("/api/conversations", json={"title": "Lisbon trip"})).json()
        await client.post("/api/conversations", json={"title": "Groceries"})
        contact = (await client.post("/api/contacts", json={
            "name": "Ana", "email": "ana@lisbon.example",
        })).json()

        results = (await client.get("/api/search", params={"q": "lisbon"})).json()["results"]

        assert results == [
            {
                "id": conversation["id"],
                "type": "conversation",
                "title": "Lisbon trip",
                "content": None,
                "source": "Postgres (Core)",
            },
            {
                "id": contact["id"],
                "type": "contact",
                "title": "Ana",
                "content": "ana@lisbon.example",
                "source": "Postgres (Core)",
            },
        ]


class TestSeed:
    """Static fixtures loaded through the admin route and the script."""

    async def test_seed_route_is_idempotent(self, client):
        first = await client.post("/api/admin/seed")
        second = await client.post("/api/admin/seed")

        assert first.status_code == 200
        assert first.json()["message"] == "Database seeded successfully."
        assert first.json()["counts"]["api_endpoints"] == len(API_ENDPOINTS)
        assert first.json()["counts"]["hedra_goals"] == len(HEDRA_GOALS)
        assert second.json()["counts"]["api_endpoints"] == 0
        assert second.json()["counts"]["hedra_goals"] == 0
        assert len((await client.get("/api/features")).json()) == len(FEATURES)
        assert len((await client.get("/api/data-sources")).json()) == len(DATA_SOURCES)
        assert len((await client.get("/api/api-endpoints")).json()) == len(API_ENDPOINTS)

    async def test_seed_single_section(self, client):
        response = await client.post("/api/admin/seed", params={"only": "data_sources"})

        assert response.json()["counts"] == {"data_sources": len(DATA_SOURCES)}
        assert (await client.get("/api/features")).json() == []

    async def test_unknown_section(self, client):
        response = await client.post("/api/admin/seed", params={"only": "bogus"})

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown seed section: bogus"}

    async def test_data_sources_reseed_drops_stale_rows(self, client, session):
        await client.post("/api/data-sources", json={
            "name": "Legacy FTP", "provider": "Self-Hosted", "type": "file_system",
        })

        await run_seed(session, only=["data_sources"])
        await session.commit()

        names = {s["name"] for s in (await client.get("/api/data-sources")).json()}
        assert "Legacy FTP" not in names
        assert len(names) == len(DATA_SOURCES)

    async def test_edited_goals_survive_reseed(self, client):
        await client.post("/api/admin/seed", params={"only": "hedra_goals"})
        await client.put("/api/hedra-goals", json={"main_goal": {"content": "Edited"}})

        await client.post("/api/admin/seed", params={"only": "hedra_goals"})

        assert (await client.get("/api/hedra-goals")).json()["main_goal"]["content"] == "Edited"

    @pytest.mark.parametrize("section", ["features", "versions", "documentation", "subsystems"])
    async def test_sections_rerun_without_duplicates(self, session, section):
        first = await run_seed(session, only=[section])
        second = await run_seed(session, only=[section])

        assert first == second
